# cards.py - card model shared by the engine and the pygame front end
from typing import List

HEART = "HEART"
DIAMOND = "DIAMOND"
CLUB = "CLUB"
SPADE = "SPADE"
SUITS = (HEART, DIAMOND, CLUB, SPADE)

RED = "red"
BLACK = "black"
SUIT_TO_COLOR = {HEART: RED, DIAMOND: RED, CLUB: BLACK, SPADE: BLACK}

SUIT_GLYPHS = {HEART: "♥", DIAMOND: "♦", CLUB: "♣", SPADE: "♠"}
RANK_TO_TEXT = {1: "A", 11: "J", 12: "Q", 13: "K"}
for _r in range(2, 11):
    RANK_TO_TEXT[_r] = str(_r)

ACE = 1
KING = 13


def is_red(suit):
    return SUIT_TO_COLOR.get(suit) == RED


class Card:
    """A single playing card.

    Suit and value are fixed at construction; the only mutation is ``flip``.
    Equality is identity: two Aces of Hearts built separately are different
    physical cards. Use ``same_card`` to compare by suit and value.
    """

    __slots__ = ("_suit", "_value", "_face_up")

    def __init__(self, suit, value, face_up=False):
        if suit not in SUIT_TO_COLOR:
            raise ValueError(f"Unknown suit: {suit!r}")
        if not isinstance(value, int) or not ACE <= value <= KING:
            raise ValueError(f"Card value must be in 1..13, got {value!r}")
        self._suit = suit
        self._value = value
        self._face_up = bool(face_up)

    @property
    def suit(self):
        return self._suit

    @property
    def value(self):
        return self._value

    @property
    def face_up(self):
        return self._face_up

    def color(self):
        return SUIT_TO_COLOR[self._suit]

    def flip(self):
        self._face_up = not self._face_up

    def same_card(self, other) -> bool:
        return self._suit == other.suit and self._value == other.value

    def __repr__(self):
        return f"{RANK_TO_TEXT[self._value]}{SUIT_GLYPHS[self._suit]}{'↑' if self._face_up else '↓'}"


def make_deck() -> List[Card]:
    """Return the 52 canonical cards, face-down, in suit then value order."""
    return [Card(suit, value, False) for suit in SUITS for value in range(ACE, KING + 1)]
