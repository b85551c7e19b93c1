import argparse
import asyncio
import logging
import random
from typing import Optional

from holdem.models import BLIND_LEVELS, BOT_PERSONALITIES, TableConfig
from .decisions import HeuristicDecisionSource
from .runner import Seat, TableRunner
from .server import TableServer

logging.basicConfig(level=logging.INFO)
LOGGER = logging.getLogger("holdem_table")


def build_bot_table(config: TableConfig, bots: int, personality: str, seed: Optional[int] = None) -> TableRunner:
    rng = random.Random(seed)
    seats = []
    for idx in range(bots):
        style = BOT_PERSONALITIES[personality] if personality != "MIXED" else list(BOT_PERSONALITIES.values())[idx % 4]
        source = HeuristicDecisionSource(style, rng=random.Random(rng.random()), think_delay_ms=config.think_delay_ms)
        seats.append(Seat(f"bot-{idx + 1}", f"{style.name.title()} Bot {idx + 1}", source))
    return TableRunner(config, seats)


def main() -> None:
    parser = argparse.ArgumentParser(description="Texas Hold'em table: bot simulation or websocket host")
    parser.add_argument("--serve", action="store_true", help="Host a websocket table instead of simulating")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8765)
    parser.add_argument("--remote-seats", type=int, default=1)
    parser.add_argument("--bots", type=int, default=4, help="House bots at the table")
    parser.add_argument(
        "--personality",
        default="MIXED",
        choices=sorted(BOT_PERSONALITIES) + ["MIXED"],
        help="Bot style; MIXED cycles through every style",
    )
    parser.add_argument("--hands", type=int, default=None, help="Stop after this many hands")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--blind-level",
        type=int,
        default=2,
        choices=range(1, len(BLIND_LEVELS) + 1),
        help="Blind level from the standard schedule (1 = 5/10)",
    )
    parser.add_argument("--starting-stack", type=int, default=1_000)
    parser.add_argument("--move-time", type=int, default=15_000, help="Move time in milliseconds (0 disables)")
    parser.add_argument("--think-delay-ms", type=int, default=0)
    parser.add_argument("--big-blind-option", action="store_true", help="Let the big blind act on an unraised pot")
    args = parser.parse_args()

    small_blind, big_blind = BLIND_LEVELS[args.blind_level - 1]
    seats = args.bots + (args.remote_seats if args.serve else 0)
    if not 2 <= seats <= 9:
        parser.error(f"a table seats 2 to 9 players, got {seats}")
    config = TableConfig(
        max_players=seats,
        starting_stack=args.starting_stack,
        small_blind=small_blind,
        big_blind=big_blind,
        decision_timeout_ms=args.move_time,
        think_delay_ms=args.think_delay_ms,
        big_blind_option=args.big_blind_option,
    )

    if args.serve:
        personality = BOT_PERSONALITIES.get(args.personality, BOT_PERSONALITIES["LOOSE"])
        server = TableServer(
            config,
            remote_seats=args.remote_seats,
            house_bots=args.bots,
            personality=personality,
            max_hands=args.hands,
        )
        asyncio.run(server.start(host=args.host, port=args.port))
        return

    runner = build_bot_table(config, args.bots, args.personality, args.seed)
    stacks = asyncio.run(runner.run(max_hands=args.hands, seed=args.seed))
    for player_id, stack in stacks.items():
        LOGGER.info("%s: %s", player_id, stack)


if __name__ == "__main__":
    main()
