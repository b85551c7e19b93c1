from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Iterable, List, Sequence, Tuple

from .cards import Card

# Every 5-card hand falls into one of 7,462 strength classes. The tables below
# enumerate them once at import, weakest first, keyed by the product of one
# prime per rank (unique per rank multiset).

PRIMES = {value: prime for value, prime in zip(range(2, 15), (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41))}
VALUES_DESC = tuple(range(14, 1, -1))


class HandCategory(IntEnum):
    HIGH_CARD = 0
    PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


@dataclass(frozen=True, order=True)
class HandValue:
    """Ordered by ``strength`` alone; equal strength means a split pot."""

    strength: int
    category: HandCategory = field(compare=False)
    tie_break: int = field(compare=False)
    cards: Tuple[Card, ...] = field(default=(), compare=False)

    @property
    def rank(self) -> int:
        return int(self.category)

    @property
    def name(self) -> str:
        return self.category.label


def _prime_product(values: Iterable[int]) -> int:
    product = 1
    for value in values:
        product *= PRIMES[value]
    return product


def _encode(key: Sequence[int]) -> int:
    encoded = 0
    for value in key:
        encoded = encoded * 15 + value
    return encoded


def _hand_classes() -> List[Tuple[HandCategory, bool, List[Tuple[Tuple[int, ...], Tuple[int, ...]]]]]:
    # (category, suited, [(significant ranks, all five values)]) weakest first.
    straights = [(5, 4, 3, 2, 14)] + [tuple(range(high, high - 5, -1)) for high in range(6, 15)]
    straight_sets = {frozenset(values) for values in straights}
    distinct = sorted(
        combo for combo in itertools.combinations(VALUES_DESC, 5) if frozenset(combo) not in straight_sets
    )
    straight_entries = [((values[0],), values) for values in straights]

    pairs = sorted(
        ((pair,) + kickers, (pair, pair) + kickers)
        for pair in VALUES_DESC
        for kickers in itertools.combinations([v for v in VALUES_DESC if v != pair], 3)
    )
    two_pairs = sorted(
        ((high, low, kicker), (high, high, low, low, kicker))
        for high, low in itertools.combinations(VALUES_DESC, 2)
        for kicker in VALUES_DESC
        if kicker not in (high, low)
    )
    trips = sorted(
        ((three,) + kickers, (three, three, three) + kickers)
        for three in VALUES_DESC
        for kickers in itertools.combinations([v for v in VALUES_DESC if v != three], 2)
    )
    full_houses = sorted(
        ((three, pair), (three, three, three, pair, pair))
        for three in VALUES_DESC
        for pair in VALUES_DESC
        if pair != three
    )
    quads = sorted(
        ((four, kicker), (four, four, four, four, kicker))
        for four in VALUES_DESC
        for kicker in VALUES_DESC
        if kicker != four
    )
    high_cards = [(values, values) for values in distinct]

    return [
        (HandCategory.HIGH_CARD, False, high_cards),
        (HandCategory.PAIR, False, pairs),
        (HandCategory.TWO_PAIR, False, two_pairs),
        (HandCategory.THREE_OF_A_KIND, False, trips),
        (HandCategory.STRAIGHT, False, straight_entries),
        (HandCategory.FLUSH, True, high_cards),
        (HandCategory.FULL_HOUSE, False, full_houses),
        (HandCategory.FOUR_OF_A_KIND, False, quads),
        (HandCategory.STRAIGHT_FLUSH, True, straight_entries),
    ]


def _build_tables() -> Tuple[Dict[int, Tuple[int, HandCategory, int]], Dict[int, Tuple[int, HandCategory, int]]]:
    unsuited: Dict[int, Tuple[int, HandCategory, int]] = {}
    suited: Dict[int, Tuple[int, HandCategory, int]] = {}
    strength = 0
    for category, is_suited, entries in _hand_classes():
        table = suited if is_suited else unsuited
        for key, values in entries:
            strength += 1
            table[_prime_product(values)] = (strength, category, _encode(key))
    return unsuited, suited


UNSUITED_LOOKUP, SUITED_LOOKUP = _build_tables()
CLASS_COUNT = len(UNSUITED_LOOKUP) + len(SUITED_LOOKUP)


def evaluate_five(cards: Sequence[Card]) -> HandValue:
    if len(cards) != 5:
        raise ValueError(f"Expected 5 cards, got {len(cards)}")
    if len(set(cards)) != 5:
        raise ValueError("Duplicate cards in hand")
    product = _prime_product(card.value for card in cards)
    table = SUITED_LOOKUP if len({card.suit for card in cards}) == 1 else UNSUITED_LOOKUP
    strength, category, tie_break = table[product]
    return HandValue(strength=strength, category=category, tie_break=tie_break, cards=tuple(cards))


def evaluate_best(cards: Sequence[Card]) -> HandValue:
    """Best 5-card hand out of 5-7 cards (hole cards plus board)."""
    if not 5 <= len(cards) <= 7:
        raise ValueError(f"Expected 5 to 7 cards, got {len(cards)}")
    return max(evaluate_five(combo) for combo in itertools.combinations(cards, 5))


def describe(value: HandValue) -> str:
    return f"{value.name} ({' '.join(card.label for card in value.cards)})"
