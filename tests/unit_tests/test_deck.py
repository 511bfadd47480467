import random
from collections import Counter

from klondike.cards import SUITS
from klondike.deck import Deck


class NoShuffle:
    def shuffle(self, seq):
        pass


def _keys(cards):
    return [(c.suit, c.value) for c in cards]


def test_new_deck_puts_all_cards_in_draw_pile():
    deck = Deck(random.Random(1))
    assert len(deck.cards) == 52
    assert len(deck.draw_pile) == 52
    assert deck.discard_pile == []
    assert sorted(_keys(deck.draw_pile)) == sorted(_keys(deck.cards))


def test_draw_card_takes_from_the_front():
    deck = Deck(NoShuffle())
    first, second = deck.draw_pile[0], deck.draw_pile[1]
    assert deck.draw_card() is first
    assert deck.draw_card() is second
    assert len(deck.draw_pile) == 50


def test_draw_card_on_empty_pile_returns_none():
    deck = Deck(NoShuffle())
    for _ in range(52):
        assert deck.draw_card() is not None
    assert deck.draw_card() is None
    assert deck.draw_pile == []


def test_shuffle_is_a_permutation():
    deck = Deck(random.Random(7))
    before = Counter(map(id, deck.draw_pile))
    deck.shuffle()
    assert Counter(map(id, deck.draw_pile)) == before
    assert len(set(_keys(deck.draw_pile))) == 52


def test_shuffle_is_roughly_uniform():
    deck = Deck(random.Random(2024))
    trials = 4000
    suit_at_front = Counter()
    for _ in range(trials):
        deck.shuffle()
        suit_at_front[deck.draw_pile[0].suit] += 1
    for suit in SUITS:
        # expected 1000 each; sd is about 27
        assert 850 < suit_at_front[suit] < 1150


def test_shuffle_is_reproducible_with_a_seed():
    a = Deck(random.Random(99))
    b = Deck(random.Random(99))
    assert _keys(a.draw_pile) == _keys(b.draw_pile)


def test_reset_gathers_everything_face_down():
    deck = Deck(random.Random(3))
    for _ in range(10):
        card = deck.draw_card()
        card.flip()
        deck.discard_pile.append(card)
    deck.reset()
    assert len(deck.draw_pile) == 52
    assert deck.discard_pile == []
    assert not any(c.face_up for c in deck.draw_pile)


def test_shuffle_in_discard_pile_keeps_order_and_turns_cards_down():
    deck = Deck(NoShuffle())
    while deck.draw_pile:
        card = deck.draw_card()
        card.flip()
        deck.discard_pile.append(card)
    discard_order = list(deck.discard_pile)

    deck.shuffle_in_discard_pile()

    assert deck.discard_pile == []
    assert deck.draw_pile == discard_order
    assert not any(c.face_up for c in deck.draw_pile)
