from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .errors import InsufficientCardsError

RANKS = "AKQJT98765432"
SUITS = "shdc"
RANK_VALUE = {rank: idx for idx, rank in enumerate(reversed(RANKS), start=2)}


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    def __post_init__(self) -> None:
        if self.rank not in RANKS:
            raise ValueError(f"Invalid rank: {self.rank}")
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def label(self) -> str:
        return f"{self.rank}{self.suit}"

    @property
    def value(self) -> int:
        return RANK_VALUE[self.rank]

    def __str__(self) -> str:
        return self.label


FULL_DECK: Tuple[Card, ...] = tuple(Card(rank, suit) for suit in SUITS for rank in RANKS[::-1])


def new_shuffled_deck(seed: Optional[int] = None) -> List[Card]:
    rng = random.Random(seed)
    deck = list(FULL_DECK)
    rng.shuffle(deck)
    return deck


def draw(deck: Sequence[Card], count: int) -> Tuple[List[Card], List[Card]]:
    """Take ``count`` cards off the front; returns ``(cards, remaining)``."""
    if count < 0:
        raise ValueError("Cannot draw a negative number of cards")
    if len(deck) < count:
        raise InsufficientCardsError(f"Cannot draw {count} cards from a deck of {len(deck)}")
    return list(deck[:count]), list(deck[count:])


def cards_to_labels(cards: Sequence[Card]) -> List[str]:
    return [card.label for card in cards]


def parse_card(label: str) -> Card:
    if len(label) != 2:
        raise ValueError(f"Invalid card label: {label}")
    return Card(label[0], label[1])


def parse_cards(labels: Sequence[str]) -> List[Card]:
    return [parse_card(label) for label in labels]
