# solitaire.py - Klondike rule engine: layout state, move legality and win detection
"""Klondike rule engine.

One :class:`Solitaire` instance holds a whole game: the deck (stock and
waste), four foundation piles and seven tableau columns. Every command
returns ``True`` when it changed the layout and ``False`` when it was
rejected, in which case nothing was touched. Pile indices are checked
before use; an out-of-range index (negative ones included) is a rejected
move, never an ``IndexError``.

Foundations are not tied to a suit up front. A foundation binds to the suit
of the first Ace placed on it, which is what makes Ace transfers between
foundations possible.
"""

import logging
from typing import List, Optional, Union

from klondike.cards import ACE, KING, Card
from klondike.deck import Deck
from klondike.foundation import FoundationPile

logger = logging.getLogger(__name__)

TABLEAU_COUNT = 7
FOUNDATION_COUNT = 4
DISCARD = "discard"


def _in_range(index, size) -> bool:
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < size


class Solitaire:
    def __init__(self, rng=None):
        self._deck = Deck(rng)
        self._foundation_piles: List[FoundationPile] = [FoundationPile() for _ in range(FOUNDATION_COUNT)]
        self._tableau_piles: List[List[Card]] = [[] for _ in range(TABLEAU_COUNT)]

    # ---------- Queries ----------
    @property
    def deck(self) -> Deck:
        return self._deck

    @property
    def draw_pile(self) -> List[Card]:
        return self._deck.draw_pile

    @property
    def discard_pile(self) -> List[Card]:
        return self._deck.discard_pile

    @property
    def tableau_piles(self) -> List[List[Card]]:
        return self._tableau_piles

    @property
    def foundation_piles(self) -> List[FoundationPile]:
        return self._foundation_piles

    @property
    def is_won_game(self) -> bool:
        return all(f.value == KING for f in self._foundation_piles)

    def tableau_pile(self, index) -> Optional[List[Card]]:
        if not _in_range(index, TABLEAU_COUNT):
            return None
        return self._tableau_piles[index]

    def foundation_pile(self, index) -> Optional[FoundationPile]:
        if not _in_range(index, FOUNDATION_COUNT):
            return None
        return self._foundation_piles[index]

    def card_count(self) -> int:
        """Cards across every pile; foundations count by their value."""
        return (
            len(self.draw_pile)
            + len(self.discard_pile)
            + sum(len(p) for p in self._tableau_piles)
            + sum(f.value for f in self._foundation_piles)
        )

    # ---------- Move legality ----------
    def is_valid_tableau_move(self, card: Card, target_pile: List[Card]) -> bool:
        if not target_pile:
            return card.value == KING
        top = target_pile[-1]
        # nothing builds on an Ace
        if top.value == ACE:
            return False
        if top.color() == card.color():
            return False
        return top.value == card.value + 1

    def is_valid_foundation_move(self, card: Card, target_foundation_index) -> bool:
        pile = self.foundation_pile(target_foundation_index)
        if pile is None:
            return False
        if not pile.is_assigned:
            return card.value == ACE
        return card.suit == pile.suit and card.value == pile.value + 1

    def _add_card_to_foundation(self, card: Card, foundation_index: int):
        pile = self._foundation_piles[foundation_index]
        if card.value == ACE:
            pile.assign_suit(card.suit)
        pile.add_card()
        if self.is_won_game:
            logger.info("Game won")

    # ---------- Commands ----------
    def new_game(self) -> bool:
        self._deck.reset()
        for f in self._foundation_piles:
            f.reset()
        self._tableau_piles = [[] for _ in range(TABLEAU_COUNT)]

        for i in range(TABLEAU_COUNT):
            for j in range(i + 1):
                card = self._deck.draw_card()
                if card is None:
                    break
                if j == i:
                    card.flip()
                self._tableau_piles[i].append(card)
        logger.info("Dealt new game; %d cards left in the draw pile", len(self.draw_pile))
        return True

    def draw_card(self) -> bool:
        card = self._deck.draw_card()
        if card is None:
            logger.debug("draw_card rejected: draw pile is empty")
            return False
        card.flip()
        self._deck.discard_pile.append(card)
        return True

    def shuffle_discard_pile(self) -> bool:
        if self._deck.draw_pile:
            logger.debug("shuffle_discard_pile rejected: draw pile still has %d cards", len(self._deck.draw_pile))
            return False
        self._deck.shuffle_in_discard_pile()
        return True

    def play_discard_pile_card_to_foundation(self, target_foundation_index) -> bool:
        discard = self._deck.discard_pile
        if not discard:
            logger.debug("play_discard_pile_card_to_foundation rejected: discard pile is empty")
            return False
        card = discard[-1]
        if not self.is_valid_foundation_move(card, target_foundation_index):
            logger.debug("Foundation %r does not accept %r", target_foundation_index, card)
            return False
        self._add_card_to_foundation(card, target_foundation_index)
        discard.pop()
        return True

    def play_discard_pile_card_to_tableau(self, target_tableau_index) -> bool:
        discard = self._deck.discard_pile
        target = self.tableau_pile(target_tableau_index)
        if not discard or target is None:
            logger.debug("play_discard_pile_card_to_tableau rejected: no card or bad target %r", target_tableau_index)
            return False
        card = discard[-1]
        if not self.is_valid_tableau_move(card, target):
            logger.debug("Tableau %d does not accept %r", target_tableau_index, card)
            return False
        target.append(card)
        discard.pop()
        return True

    def move_tableau_card_to_foundation(self, tableau_index, target_foundation_index) -> bool:
        source = self.tableau_pile(tableau_index)
        if not source:
            logger.debug("move_tableau_card_to_foundation rejected: tableau %r is empty or missing", tableau_index)
            return False
        card = source[-1]
        if not self.is_valid_foundation_move(card, target_foundation_index):
            logger.debug("Foundation %r does not accept %r", target_foundation_index, card)
            return False
        self._add_card_to_foundation(card, target_foundation_index)
        source.pop()
        return True

    def move_tableau_card_to_tableau(self, source_tableau_index, card_index, target_tableau_index) -> bool:
        """Move the run starting at ``card_index`` onto another column.

        Only the lead card is checked against the target; the cards under it
        are taken to be a valid run already and travel with it unchanged.
        """
        source = self.tableau_pile(source_tableau_index)
        target = self.tableau_pile(target_tableau_index)
        if source is None or target is None or source is target:
            logger.debug(
                "move_tableau_card_to_tableau rejected: bad piles %r -> %r",
                source_tableau_index, target_tableau_index,
            )
            return False
        if not _in_range(card_index, len(source)):
            return False
        card = source[card_index]
        if not card.face_up:
            logger.debug("move_tableau_card_to_tableau rejected: %r is face-down", card)
            return False
        if not self.is_valid_tableau_move(card, target):
            logger.debug("Tableau %d does not accept %r", target_tableau_index, card)
            return False
        run = source[card_index:]
        del source[card_index:]
        target.extend(run)
        return True

    def flip_tableau_card(self, tableau_index) -> bool:
        pile = self.tableau_pile(tableau_index)
        if not pile or pile[-1].face_up:
            return False
        pile[-1].flip()
        return True

    def move_foundation_card_to_tableau(self, foundation_index, target_tableau_index) -> bool:
        foundation = self.foundation_pile(foundation_index)
        target = self.tableau_pile(target_tableau_index)
        if foundation is None or target is None:
            return False
        card = foundation.top_card()
        if card is None:
            logger.debug("move_foundation_card_to_tableau rejected: foundation %d is empty", foundation_index)
            return False
        if not self.is_valid_tableau_move(card, target):
            logger.debug("Tableau %d does not accept %r", target_tableau_index, card)
            return False
        target.append(card)
        foundation.remove_card()
        return True

    def move_foundation_card_to_foundation(self, source_foundation_index, target_foundation_index) -> bool:
        """Shift a lone Ace to an empty, unassigned foundation.

        The source keeps its suit binding after dropping to zero.
        """
        source = self.foundation_pile(source_foundation_index)
        target = self.foundation_pile(target_foundation_index)
        if source is None or target is None or source is target:
            return False
        if source.value != ACE or not source.is_assigned:
            return False
        if target.is_assigned or not target.is_empty:
            return False
        target.assign_suit(source.suit)
        target.add_card()
        source.remove_card()
        return True

    # ---------- Conveniences used by the front end ----------
    def auto_move_to_foundation(self, source: Union[str, int]) -> bool:
        """Play the discard top (``"discard"``) or a tableau top to the first foundation that takes it."""
        for fi in range(FOUNDATION_COUNT):
            if source == DISCARD:
                moved = self.play_discard_pile_card_to_foundation(fi)
            else:
                moved = self.move_tableau_card_to_foundation(source, fi)
            if moved:
                return True
        return False

    def can_auto_finish(self) -> bool:
        """Eligible when stock and waste are empty and all tableau cards are face-up."""
        if self.draw_pile or self.discard_pile:
            return False
        return all(c.face_up for p in self._tableau_piles for c in p)

    def auto_finish_step(self) -> bool:
        for ti, pile in enumerate(self._tableau_piles):
            if pile and self.auto_move_to_foundation(ti):
                return True
        return False

    def cascade_step(self) -> Optional[Card]:
        """Take one card off the fullest foundation for the win teardown."""
        candidates = [f for f in self._foundation_piles if f.top_card() is not None]
        if not candidates:
            return None
        pile = max(candidates, key=lambda f: f.value)
        card = pile.top_card()
        pile.remove_card()
        return card
