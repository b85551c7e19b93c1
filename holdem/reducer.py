from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from .game import apply_action, new_table, next_hand
from .models import GameState, PlayerAction, PlayerSeed, TableConfig

# Unidirectional-update interface: hosts that keep one immutable state per
# render dispatch events through ``reduce`` instead of calling the engine.


@dataclass(frozen=True)
class StartHand:
    seed: Optional[int] = None


@dataclass(frozen=True)
class Act:
    player_id: str
    action: PlayerAction


@dataclass(frozen=True)
class SetMessage:
    message: str


Event = Union[StartHand, Act, SetMessage]


def initial_state(seeds: Sequence[PlayerSeed], config: TableConfig) -> GameState:
    return new_table(seeds, config)


def reduce(state: GameState, event: Event) -> GameState:
    if isinstance(event, StartHand):
        return next_hand(state, seed=event.seed)
    if isinstance(event, Act):
        return apply_action(state, event.player_id, event.action)
    if isinstance(event, SetMessage):
        next_state = copy.deepcopy(state)
        next_state.game_message = event.message
        return next_state
    raise TypeError(f"Unsupported event {event!r}")
