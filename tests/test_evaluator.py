import itertools
from collections import Counter

import pytest

from holdem.cards import FULL_DECK, new_shuffled_deck, parse_cards
from holdem.evaluator import (
    CLASS_COUNT,
    SUITED_LOOKUP,
    UNSUITED_LOOKUP,
    HandCategory,
    describe,
    evaluate_best,
    evaluate_five,
)


def test_evaluate_identifies_all_hand_categories():
    cases = [
        (HandCategory.STRAIGHT_FLUSH, ["Ah", "Kh", "Qh", "Jh", "Th"]),
        (HandCategory.FOUR_OF_A_KIND, ["As", "Ah", "Ad", "Ac", "Kd"]),
        (HandCategory.FULL_HOUSE, ["Qc", "Qd", "Qs", "9h", "9s"]),
        (HandCategory.FLUSH, ["Ah", "Jh", "9h", "6h", "2h"]),
        (HandCategory.STRAIGHT, ["9h", "8d", "7c", "6s", "5h"]),
        (HandCategory.THREE_OF_A_KIND, ["8h", "8d", "8s", "Qd", "Js"]),
        (HandCategory.TWO_PAIR, ["7h", "7d", "4s", "4c", "As"]),
        (HandCategory.PAIR, ["6h", "6s", "Qh", "8d", "4c"]),
        (HandCategory.HIGH_CARD, ["As", "Kd", "Jh", "9c", "4d"]),
    ]

    for expected, labels in cases:
        value = evaluate_five(parse_cards(labels))
        assert value.category == expected, f"labels={labels}"
        assert value.rank == int(expected)


def test_every_strength_class_is_enumerated_once():
    entries = list(UNSUITED_LOOKUP.values()) + list(SUITED_LOOKUP.values())
    assert CLASS_COUNT == 7462
    assert sorted(strength for strength, _, _ in entries) == list(range(1, 7463))

    per_category = Counter(category for _, category, _ in entries)
    assert dict(per_category) == {
        HandCategory.STRAIGHT_FLUSH: 10,
        HandCategory.FOUR_OF_A_KIND: 156,
        HandCategory.FULL_HOUSE: 156,
        HandCategory.FLUSH: 1277,
        HandCategory.STRAIGHT: 10,
        HandCategory.THREE_OF_A_KIND: 858,
        HandCategory.TWO_PAIR: 858,
        HandCategory.PAIR: 2860,
        HandCategory.HIGH_CARD: 1277,
    }


def test_categories_occupy_contiguous_strength_bands():
    entries = sorted(list(UNSUITED_LOOKUP.values()) + list(SUITED_LOOKUP.values()))
    categories = [category for _, category, _ in entries]
    assert categories == sorted(categories)


def test_wheel_is_the_lowest_straight():
    wheel = evaluate_best(parse_cards(["Ah", "2d", "3c", "4s", "5h", "9d", "Kd"]))
    six_high = evaluate_five(parse_cards(["2h", "3d", "4c", "5s", "6h"]))
    assert wheel.category == HandCategory.STRAIGHT
    assert wheel < six_high
    assert {card.label for card in wheel.cards} == {"Ah", "2d", "3c", "4s", "5h"}


def test_steel_wheel_is_the_lowest_straight_flush():
    steel = evaluate_five(parse_cards(["Ad", "2d", "3d", "4d", "5d"]))
    six_high = evaluate_five(parse_cards(["2c", "3c", "4c", "5c", "6c"]))
    quads = evaluate_five(parse_cards(["As", "Ah", "Ad", "Ac", "Kd"]))
    assert steel.category == HandCategory.STRAIGHT_FLUSH
    assert quads < steel < six_high


def test_best_hand_selects_royal_flush_from_seven_cards():
    value = evaluate_best(parse_cards(["Ah", "Kh", "2c", "Qh", "Jh", "Th", "Ad"]))
    assert value.category == HandCategory.STRAIGHT_FLUSH
    assert value.name == "Straight Flush"
    assert {card.label for card in value.cards} == {"Ah", "Kh", "Qh", "Jh", "Th"}


def test_full_house_beats_flush():
    full_house = evaluate_best(parse_cards(["Kh", "Kd", "Ks", "4h", "4c", "9h", "2h"]))
    flush = evaluate_best(parse_cards(["Ah", "Jh", "9h", "4h", "2h", "Kd", "3c"]))
    assert full_house.category == HandCategory.FULL_HOUSE
    assert flush.category == HandCategory.FLUSH
    assert full_house > flush


def test_kickers_break_equal_pairs():
    hand_a = evaluate_best(parse_cards(["Ah", "Ad", "Kc", "Qs", "9h", "2d", "3c"]))
    hand_b = evaluate_best(parse_cards(["Ah", "Ad", "Qc", "Js", "8h", "2d", "3c"]))
    assert hand_a > hand_b


def test_two_pair_compares_high_pair_then_low_pair_then_kicker():
    kings_up = evaluate_five(parse_cards(["Kh", "Kd", "2c", "2s", "3h"]))
    queens_up = evaluate_five(parse_cards(["Qh", "Qd", "Jc", "Js", "Ah"]))
    kings_fives = evaluate_five(parse_cards(["Kc", "Ks", "5c", "5s", "2h"]))
    kings_fives_better_kicker = evaluate_five(parse_cards(["Kc", "Ks", "5d", "5h", "3d"]))
    assert kings_up > queens_up
    assert kings_fives > kings_up
    assert kings_fives_better_kicker > kings_fives


def test_same_ranks_in_different_suits_tie():
    hand_a = evaluate_five(parse_cards(["As", "Kd", "Jh", "9c", "4d"]))
    hand_b = evaluate_five(parse_cards(["Ac", "Kh", "Js", "9d", "4h"]))
    assert hand_a == hand_b
    assert hand_a.strength == hand_b.strength


def test_board_plays_when_it_is_best():
    board = parse_cards(["Ts", "Js", "Qs", "Ks", "As"])
    first = evaluate_best(parse_cards(["2c", "3d"]) + board)
    second = evaluate_best(parse_cards(["7h", "8h"]) + board)
    assert first == second


def test_evaluate_rejects_wrong_card_counts_and_duplicates():
    with pytest.raises(ValueError, match="Expected 5 cards"):
        evaluate_five(parse_cards(["As", "Kd", "Jh", "9c"]))
    with pytest.raises(ValueError, match="Duplicate"):
        evaluate_five(parse_cards(["As", "As", "Jh", "9c", "4d"]))
    with pytest.raises(ValueError, match="Expected 5 to 7"):
        evaluate_best(parse_cards(["As", "Kd", "Jh", "9c"]))


def test_random_seven_card_hands_evaluate_consistently():
    deck = new_shuffled_deck(seed=777)
    for idx in range(0, 42, 7):
        cards = deck[idx : idx + 7]
        best = evaluate_best(cards)
        manual = max(evaluate_five(combo) for combo in itertools.combinations(cards, 5))
        assert best.strength == manual.strength
        assert 1 <= best.strength <= CLASS_COUNT


def test_every_flush_draws_from_the_suited_table():
    hearts = [card for card in FULL_DECK if card.suit == "h"]
    categories = {evaluate_five(combo).category for combo in itertools.combinations(hearts, 5)}
    assert categories == {HandCategory.FLUSH, HandCategory.STRAIGHT_FLUSH}


def test_describe_lists_cards():
    value = evaluate_five(parse_cards(["Qc", "Qd", "Qs", "9h", "9s"]))
    assert describe(value) == "Full House (Qc Qd Qs 9h 9s)"
