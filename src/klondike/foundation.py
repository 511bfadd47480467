# foundation.py - Ace-to-King foundation pile kept as a counter
from typing import Optional

from klondike.cards import ACE, KING, Card


class FoundationPile:
    """
    A foundation stores no card objects, only the suit it is bound to and how
    many ranks (0..13) have been built on it.

    Piles start unassigned and bind to a suit when the first Ace lands.
    ``remove_card`` never un-binds the suit; only ``reset`` does, so a pile
    emptied during play keeps its suit until the next deal.
    """

    __slots__ = ("_suit", "_value")

    def __init__(self, suit: Optional[str] = None):
        self._suit = suit
        self._value = 0

    @property
    def suit(self) -> Optional[str]:
        return self._suit

    @property
    def value(self) -> int:
        return self._value

    @property
    def is_assigned(self) -> bool:
        return self._suit is not None

    @property
    def is_empty(self) -> bool:
        return self._value == 0

    @property
    def is_complete(self) -> bool:
        return self._value == KING

    def reset(self):
        self._suit = None
        self._value = 0

    def assign_suit(self, suit: str):
        if self._suit is None:
            self._suit = suit

    def add_card(self):
        if self._value < KING:
            self._value += 1

    def remove_card(self):
        if self._value > 0:
            self._value -= 1

    def top_card(self) -> Optional[Card]:
        """Build a face-up stand-in for the top card; it is not kept."""
        if self._suit is None or self._value < ACE:
            return None
        return Card(self._suit, self._value, face_up=True)

    def __repr__(self):
        return f"FoundationPile(suit={self._suit!r}, value={self._value})"
