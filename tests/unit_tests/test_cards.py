import pytest

from klondike.cards import BLACK, CLUB, DIAMOND, HEART, RED, SPADE, SUITS, Card, is_red, make_deck


@pytest.mark.parametrize(
    "suit, color",
    [(HEART, RED), (DIAMOND, RED), (CLUB, BLACK), (SPADE, BLACK)],
)
def test_color_follows_suit(suit, color):
    card = Card(suit, 7)
    assert card.color() == color
    card.flip()
    assert card.color() == color
    assert is_red(suit) == (color == RED)


def test_flip_toggles_face_up():
    card = Card(SPADE, 1)
    assert card.face_up is False
    card.flip()
    assert card.face_up is True
    card.flip()
    assert card.face_up is False


def test_suit_and_value_are_read_only():
    card = Card(HEART, 12, face_up=True)
    with pytest.raises(AttributeError):
        card.value = 3  # type: ignore[misc]
    with pytest.raises(AttributeError):
        card.suit = CLUB  # type: ignore[misc]


@pytest.mark.parametrize("suit, value", [(HEART, 0), (HEART, 14), ("STAR", 5)])
def test_invalid_cards_are_rejected(suit, value):
    with pytest.raises(ValueError):
        Card(suit, value)


def test_cards_compare_by_identity():
    a = Card(HEART, 1)
    b = Card(HEART, 1)
    assert a != b
    assert a.same_card(b)
    assert not a.same_card(Card(DIAMOND, 1))


def test_repr_shows_rank_suit_and_orientation():
    assert repr(Card(SPADE, 13, face_up=True)) == "K♠↑"
    assert repr(Card(HEART, 10)) == "10♥↓"


def test_make_deck_has_every_card_once_face_down():
    deck = make_deck()
    assert len(deck) == 52
    assert {(c.suit, c.value) for c in deck} == {(s, v) for s in SUITS for v in range(1, 14)}
    assert not any(c.face_up for c in deck)
