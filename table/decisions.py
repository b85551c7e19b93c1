from __future__ import annotations

import asyncio
import logging
import random
from typing import Optional

from websockets.exceptions import ConnectionClosed

from holdem.errors import ExternalDecisionTimeoutError, IllegalActionError
from holdem.game import act_payload
from holdem.models import BOT_PERSONALITIES, BotPersonality, GameState, PlayerAction
from .bots import choose_action
from .protocol import decode, envelope

LOGGER = logging.getLogger("holdem_decisions")


class DecisionSource:
    """Something that can pick an action for one seat: a bot, a remote client
    or a queue fed by a local UI."""

    async def decide(self, view: GameState, seat_id: str) -> PlayerAction:
        raise NotImplementedError

    async def rejected(self, seat_id: str, error: IllegalActionError) -> None:
        """Told when the table refused the last decision."""


class HeuristicDecisionSource(DecisionSource):
    def __init__(
        self,
        personality: BotPersonality = BOT_PERSONALITIES["LOOSE"],
        rng: Optional[random.Random] = None,
        think_delay_ms: int = 0,
    ) -> None:
        self.personality = personality
        self.rng = rng or random.Random()
        self.think_delay_ms = think_delay_ms

    async def decide(self, view: GameState, seat_id: str) -> PlayerAction:
        if self.think_delay_ms > 0:
            await asyncio.sleep(self.think_delay_ms / 1000)
        return choose_action(view, seat_id, self.personality, self.rng)


class QueueDecisionSource(DecisionSource):
    """Human seat: whatever front end owns the seat pushes actions in."""

    def __init__(self) -> None:
        self.queue: "asyncio.Queue[PlayerAction]" = asyncio.Queue()
        self.errors: list[IllegalActionError] = []

    def submit(self, action: PlayerAction) -> None:
        self.queue.put_nowait(action)

    async def decide(self, view: GameState, seat_id: str) -> PlayerAction:
        return await self.queue.get()

    async def rejected(self, seat_id: str, error: IllegalActionError) -> None:
        self.errors.append(error)


class RemoteDecisionSource(DecisionSource):
    """Seat played by a websocket client: sends ``act`` and waits for ``action``."""

    def __init__(self, websocket, time_ms: int = 0) -> None:
        self.websocket = websocket
        self.time_ms = time_ms

    async def decide(self, view: GameState, seat_id: str) -> PlayerAction:
        payload = act_payload(view, seat_id)
        payload["time_ms"] = self.time_ms
        await self.websocket.send(envelope("act", payload))
        while True:
            message = decode(await self.websocket.recv())
            if message.get("type") != "action":
                continue
            try:
                return PlayerAction.from_dict(message)
            except ValueError as exc:
                raise IllegalActionError("BAD_SCHEMA", f"Malformed action: {exc}") from exc

    async def rejected(self, seat_id: str, error: IllegalActionError) -> None:
        try:
            await self.websocket.send(envelope("error", {"code": error.code, "msg": error.msg}))
        except ConnectionClosed:
            pass


async def request_decision(source: DecisionSource, view: GameState, seat_id: str, timeout_ms: int) -> PlayerAction:
    """Ask ``source`` for an action under the move clock.

    A timeout or a failing source folds the seat; a malformed decision is
    raised as IllegalActionError so the caller can ask again. ``timeout_ms``
    of 0 disables the clock.
    """
    try:
        if timeout_ms <= 0:
            return await source.decide(view, seat_id)
        try:
            return await asyncio.wait_for(source.decide(view, seat_id), timeout=timeout_ms / 1000)
        except asyncio.TimeoutError as exc:
            raise ExternalDecisionTimeoutError(seat_id, timeout_ms) from exc
    except IllegalActionError:
        raise
    except ExternalDecisionTimeoutError as exc:
        LOGGER.warning("%s; folding", exc)
        return PlayerAction.fold()
    except Exception as exc:  # noqa: BLE001
        LOGGER.warning("Decision source for seat %s failed: %s; folding", seat_id, exc)
        return PlayerAction.fold()
