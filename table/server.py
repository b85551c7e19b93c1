from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import websockets
from websockets.server import WebSocketServerProtocol

from holdem.errors import TableError
from holdem.game import snapshot_payload
from holdem.models import BOT_PERSONALITIES, BotPersonality, GameState, TableConfig
from .decisions import HeuristicDecisionSource, RemoteDecisionSource
from .protocol import decode, envelope
from .runner import Seat, TableRunner

LOGGER = logging.getLogger("holdem_server")


@dataclass
class RemoteClient:
    player_id: str
    name: str
    seat: int
    websocket: WebSocketServerProtocol


class TableServer:
    """One websocket table: remote seats fill first, house bots take the rest.

    The match starts as soon as the last remote seat says hello.
    """

    def __init__(
        self,
        config: TableConfig,
        remote_seats: int = 1,
        house_bots: int = 1,
        personality: BotPersonality = BOT_PERSONALITIES["LOOSE"],
        max_hands: Optional[int] = None,
    ) -> None:
        if remote_seats < 1:
            raise ValueError("At least one remote seat required")
        if remote_seats + house_bots > config.max_players:
            raise ValueError("Table config does not have enough seats")
        if remote_seats + house_bots < 2:
            raise ValueError("A table needs at least two seats")
        self.config = config
        self.remote_seats = remote_seats
        self.house_bots = house_bots
        self.personality = personality
        self.max_hands = max_hands
        self.clients: Dict[str, RemoteClient] = {}
        self.runner: Optional[TableRunner] = None
        self.session_task: Optional[asyncio.Task] = None
        self.done_event = asyncio.Event()
        self.lock = asyncio.Lock()

    async def start(self, host: str = "0.0.0.0", port: int = 8765) -> None:
        async with websockets.serve(self._handle_connection, host, port):
            LOGGER.info("Table server listening on %s:%s", host, port)
            await asyncio.Future()

    async def _handle_connection(self, websocket: WebSocketServerProtocol) -> None:
        hello = await self._read_message(websocket)
        if not hello or hello.get("type") != "hello":
            await self._send_error(websocket, "BAD_HELLO", "Expected hello")
            await websocket.close()
            return

        name_raw = hello.get("name")
        name = name_raw.strip() if isinstance(name_raw, str) else ""
        if not name:
            await self._send_error(websocket, "BAD_SCHEMA", "name required")
            await websocket.close()
            return

        try:
            client = await self.register(name, websocket)
        except TableError as exc:
            await self._send_error(websocket, "TABLE_FULL", str(exc))
            await websocket.close()
            return

        LOGGER.info("Seat %s (%s) connected", client.player_id, client.name)
        await self._send_json(
            websocket,
            "welcome",
            {
                "seat": client.seat,
                "player_id": client.player_id,
                "config": {
                    "max_players": self.config.max_players,
                    "starting_stack": self.config.starting_stack,
                    "small_blind": self.config.small_blind,
                    "big_blind": self.config.big_blind,
                    "decision_timeout_ms": self.config.decision_timeout_ms,
                },
            },
        )
        if len(self.clients) == self.remote_seats:
            await self._start_session()
        await self._wait_for_completion(client)

    async def register(self, name: str, websocket: WebSocketServerProtocol) -> RemoteClient:
        async with self.lock:
            if self.runner is not None or len(self.clients) >= self.remote_seats:
                raise TableError("Table is full")
            player_id = f"remote-{len(self.clients) + 1}"
            client = RemoteClient(player_id=player_id, name=name, seat=len(self.clients), websocket=websocket)
            self.clients[player_id] = client
            return client

    def build_runner(self) -> TableRunner:
        seats: List[Seat] = []
        for client in self.clients.values():
            source = RemoteDecisionSource(client.websocket, time_ms=self.config.decision_timeout_ms)
            seats.append(Seat(client.player_id, client.name, source))
        for idx in range(1, self.house_bots + 1):
            bot = HeuristicDecisionSource(self.personality, think_delay_ms=self.config.think_delay_ms)
            seats.append(Seat(f"house-{idx}", f"House {idx}", bot))
        runner = TableRunner(self.config, seats)
        runner.add_listener(self._on_table_event)
        return runner

    async def _start_session(self) -> None:
        async with self.lock:
            if self.runner is not None:
                return
            self.runner = self.build_runner()
        self.session_task = asyncio.create_task(self._run_session())

    async def _run_session(self) -> None:
        assert self.runner is not None
        try:
            await self.runner.run(max_hands=self.max_hands)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("Table session crashed: %s", exc)
            raise
        finally:
            self.done_event.set()

    async def _on_table_event(self, event: str, state: GameState) -> None:
        if event == "state":
            for client in self.clients.values():
                await self._send_json(client.websocket, "state", snapshot_payload(state, client.player_id))
        elif event == "end_hand":
            assert state.hand_over is not None
            for client in self.clients.values():
                payload = snapshot_payload(state, client.player_id)
                payload["hand_number"] = state.hand_number
                payload["result"] = state.hand_over.to_dict()
                await self._send_json(client.websocket, "end_hand", payload)
        elif event == "match_end":
            assert self.runner is not None
            result = self.runner.engine.match_result_payload()
            for client in self.clients.values():
                await self._send_json(client.websocket, "match_end", result)

    async def _wait_for_completion(self, client: RemoteClient) -> None:
        wait_done = asyncio.create_task(self.done_event.wait())
        wait_closed = asyncio.create_task(client.websocket.wait_closed())
        try:
            done, _ = await asyncio.wait([wait_done, wait_closed], return_when=asyncio.FIRST_COMPLETED)
            if wait_closed in done and not self.done_event.is_set():
                LOGGER.info("Seat %s (%s) disconnected", client.player_id, client.name)
        finally:
            for task in (wait_done, wait_closed):
                if not task.done():
                    task.cancel()

    async def _send_json(self, websocket: WebSocketServerProtocol, msg_type: str, payload: Dict[str, object]) -> None:
        try:
            await websocket.send(envelope(msg_type, payload))
        except websockets.ConnectionClosed:
            pass

    async def _send_error(self, websocket: WebSocketServerProtocol, code: str, msg: str) -> None:
        await self._send_json(websocket, "error", {"code": code, "msg": msg})

    async def _read_message(self, websocket: WebSocketServerProtocol) -> Optional[Dict[str, object]]:
        try:
            raw = await asyncio.wait_for(websocket.recv(), timeout=5)
        except (asyncio.TimeoutError, websockets.ConnectionClosed):
            return None
        return decode(raw)
