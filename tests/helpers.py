from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import pytest

from holdem import game
from holdem.cards import FULL_DECK, Card, parse_cards
from holdem.game import GameEngine
from holdem.models import ActionKind, GameState, PlayerAction, PlayerSeed, TableConfig


def create_engine(
    *,
    players: int = 3,
    starting_stack: int = 1_000,
    small_blind: int = 10,
    big_blind: int = 20,
    **overrides,
) -> GameEngine:
    """Instantiate an engine with ``players`` seats named p0, p1, ..."""
    config = TableConfig(starting_stack=starting_stack, small_blind=small_blind, big_blind=big_blind, **overrides)
    engine = GameEngine(config)
    for idx in range(players):
        engine.seat_player(f"p{idx}", f"Player{idx}")
    return engine


def seeds(*stacks: int) -> List[PlayerSeed]:
    return [PlayerSeed(id=f"p{idx}", name=f"Player{idx}", stack=stack) for idx, stack in enumerate(stacks)]


def start_hand(engine: GameEngine, seed: int = 42) -> GameState:
    state = engine.start_hand(seed=seed)
    assert state.is_hand_in_progress
    return state


def stacked_deck(labels: Sequence[str]) -> List[Card]:
    """Deck whose top cards are ``labels``; the rest follow in a fixed order."""
    top = parse_cards(labels)
    return top + [card for card in FULL_DECK if card not in top]


def stack_deck(monkeypatch: pytest.MonkeyPatch, labels: Sequence[str]) -> None:
    deck = stacked_deck(labels)
    monkeypatch.setattr(game, "new_shuffled_deck", lambda seed=None: list(deck))


def perform_actions(engine: GameEngine, actions: Iterable[Tuple[str, PlayerAction]]) -> None:
    """Apply a scripted sequence of (player_id, action)."""
    for player_id, action in actions:
        engine.apply_action(player_id, action)


def passive_action(state: GameState, player_id: str) -> PlayerAction:
    legal = game.get_valid_actions(state, player_id)
    if ActionKind.CHECK in legal:
        return PlayerAction.check()
    if ActionKind.CALL in legal:
        return PlayerAction.call()
    return PlayerAction.fold()


def auto_complete_hand(engine: GameEngine) -> Optional[GameState]:
    """Check/call the current hand down to its end."""
    while not engine.is_hand_complete():
        actor = engine.next_actor()
        if actor is None:
            break
        engine.apply_action(actor, passive_action(engine.state, actor))
    return engine.state
