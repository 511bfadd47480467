# deck.py - the 52-card pack with its draw (stock) and discard (waste) piles
import logging
import random
from typing import List, Optional

from klondike.cards import Card, make_deck

logger = logging.getLogger(__name__)


class Deck:
    """
    Owns every card of the pack. ``draw_pile[0]`` is the next card to draw;
    ``discard_pile[-1]`` is the top of the waste.

    ``rng`` only needs a ``shuffle(list)`` method, so tests can pass a seeded
    ``random.Random`` or a stub that records or fixes the order.
    """

    def __init__(self, rng=None):
        self.rng = rng if rng is not None else random.Random()
        self._cards: List[Card] = make_deck()
        self._draw_pile: List[Card] = []
        self._discard_pile: List[Card] = []
        self.reset()

    @property
    def cards(self) -> List[Card]:
        return self._cards

    @property
    def draw_pile(self) -> List[Card]:
        return self._draw_pile

    @property
    def discard_pile(self) -> List[Card]:
        return self._discard_pile

    def reset(self):
        self._discard_pile.clear()
        self._draw_pile[:] = self._cards
        for c in self._draw_pile:
            if c.face_up:
                c.flip()
        self.shuffle()

    def draw_card(self) -> Optional[Card]:
        if not self._draw_pile:
            return None
        return self._draw_pile.pop(0)

    def shuffle(self):
        # random.shuffle is Fisher-Yates
        self.rng.shuffle(self._draw_pile)

    def shuffle_in_discard_pile(self):
        """Move the waste back under the stock, face-down, keeping its order."""
        moved = len(self._discard_pile)
        for c in self._discard_pile:
            if c.face_up:
                c.flip()
            self._draw_pile.append(c)
        self._discard_pile.clear()
        logger.debug("Recycled %d discard cards into the draw pile", moved)
