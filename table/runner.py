from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from holdem.errors import IllegalActionError
from holdem.game import GameEngine
from holdem.models import GameState, HandResult, PlayerAction, TableConfig
from .decisions import DecisionSource, request_decision

LOGGER = logging.getLogger("holdem_table")

# Listeners see every table event with the full (unredacted) state; anything
# that forwards it to players must build per-seat views itself.
TableListener = Callable[[str, GameState], Awaitable[None]]


@dataclass
class Seat:
    player_id: str
    name: str
    source: DecisionSource
    is_human: bool = False
    stack: Optional[int] = None


class TableRunner:
    """Plays hands at one table, asking each seat's decision source in turn."""

    def __init__(self, config: TableConfig, seats: Sequence[Seat]) -> None:
        if len(seats) < 2:
            raise ValueError("A table needs at least two seats")
        self.engine = GameEngine(config)
        self.sources: Dict[str, DecisionSource] = {}
        self.humans = {seat.player_id for seat in seats if seat.is_human}
        self.listeners: List[TableListener] = []
        for seat in seats:
            self.engine.seat_player(seat.player_id, seat.name, is_human=seat.is_human, stack=seat.stack)
            self.sources[seat.player_id] = seat.source

    @property
    def config(self) -> TableConfig:
        return self.engine.config

    def add_listener(self, listener: TableListener) -> None:
        self.listeners.append(listener)

    async def run(self, max_hands: Optional[int] = None, seed: Optional[int] = None) -> Dict[str, int]:
        # A match is repeated hands until one stack remains or the hand limit hits.
        played = 0
        while self.engine.can_start_hand() and (max_hands is None or played < max_hands):
            await self.play_hand(seed=None if seed is None else seed + played)
            played += 1

        stacks = self.engine.stacks()
        LOGGER.info("Match over after %s hands: %s", played, self.engine.match_result_payload().get("winner"))
        if self.engine.state is not None:
            await self._emit("match_end", self.engine.state)
        return stacks

    async def play_hand(self, seed: Optional[int] = None) -> HandResult:
        state = self.engine.start_hand(seed)
        dealer = state.players[state.dealer_index]
        LOGGER.info("Hand %s started; button=%s stacks=%s", state.hand_number, dealer.id, self.engine.stacks())
        await self._emit("state", state)

        while not self.engine.is_hand_complete():
            seat_id = self.engine.next_actor()
            assert seat_id is not None, "hand in progress without an actor"
            action = await self._decide_and_apply(seat_id)
            LOGGER.debug(
                "Applied action hand=%s seat=%s action=%s amount=%s",
                state.hand_number,
                seat_id,
                action.kind.value,
                action.amount,
            )
            await self._emit("state", self._state())

        final = self._state()
        assert final.hand_over is not None
        LOGGER.info("Hand %s finished: %s", final.hand_number, final.game_message)
        await self._emit("end_hand", final)
        return final.hand_over

    async def _decide_and_apply(self, seat_id: str) -> PlayerAction:
        source = self.sources[seat_id]
        # Human seats wait on their front end; everyone else is on the clock.
        timeout_ms = 0 if seat_id in self.humans else self.config.decision_timeout_ms
        for attempt in range(1, self.config.max_decision_attempts + 1):
            view = self.engine.public_view(seat_id)
            action: Optional[PlayerAction] = None
            try:
                action = await request_decision(source, view, seat_id, timeout_ms)
                self.engine.apply_action(seat_id, action)
                return action
            except IllegalActionError as exc:
                LOGGER.warning(
                    "Rejected action seat=%s action=%s amount=%s code=%s reason=%s attempt=%s",
                    seat_id,
                    action.kind.value if action else None,
                    action.amount if action else None,
                    exc.code,
                    exc.msg,
                    attempt,
                )
                await source.rejected(seat_id, exc)

        LOGGER.warning("Seat %s used up %s attempts; folding", seat_id, self.config.max_decision_attempts)
        action = PlayerAction.fold()
        self.engine.apply_action(seat_id, action)
        return action

    def _state(self) -> GameState:
        assert self.engine.state is not None
        return self.engine.state

    async def _emit(self, event: str, state: GameState) -> None:
        for listener in self.listeners:
            await listener(event, state)
