import pytest

from holdem.cards import FULL_DECK, Card, draw, new_shuffled_deck, parse_card
from holdem.errors import InsufficientCardsError
from holdem.models import Stage

from .helpers import auto_complete_hand, create_engine, start_hand


def test_full_deck_has_fifty_two_unique_cards():
    assert len(FULL_DECK) == 52
    assert len(set(FULL_DECK)) == 52


def test_shuffle_is_reproducible_with_seed():
    assert new_shuffled_deck(7) == new_shuffled_deck(7)
    assert sorted(new_shuffled_deck(7), key=str) == sorted(FULL_DECK, key=str)


def test_draw_returns_cards_and_remaining_without_touching_input():
    deck = new_shuffled_deck(3)
    cards, remaining = draw(deck, 3)
    assert cards == deck[:3]
    assert remaining == deck[3:]
    assert len(deck) == 52


def test_draw_raises_when_deck_exhausted():
    deck = [Card("A", "h"), Card("K", "d")]
    _, remaining = draw(deck, 2)
    with pytest.raises(InsufficientCardsError, match="Cannot draw 1"):
        draw(remaining, 1)


def test_invalid_cards_rejected():
    with pytest.raises(ValueError, match="Invalid rank"):
        Card("1", "s")
    with pytest.raises(ValueError, match="Invalid suit"):
        Card("A", "x")
    with pytest.raises(ValueError, match="Invalid card label"):
        parse_card("10h")


def test_card_value_and_label():
    card = parse_card("Td")
    assert card.value == 10
    assert str(card) == "Td"
    assert parse_card("Ac").value == 14
    assert parse_card("2s").value == 2


def test_full_ring_hand_deals_twenty_three_distinct_cards():
    for seed in range(50):
        engine = create_engine(players=9)
        start_hand(engine, seed=seed)
        hole = [card for player in engine.state.players for card in player.hole_cards]
        state = auto_complete_hand(engine)
        assert state.stage == Stage.SHOWDOWN
        dealt = hole + state.community_cards
        assert len(dealt) == 23
        assert len(set(dealt)) == 23
        assert set(dealt) <= set(FULL_DECK)
