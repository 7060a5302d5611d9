import argparse
import logging
from typing import Dict, List, Optional

from .bots import BotPlayer
from .console import ConsolePlayer, render_events, render_table
from .game import Event
from .models import TableConfig
from .session import Agent, Session

LOGGER = logging.getLogger("holdem")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Texas Hold'em table simulator")
    parser.add_argument("--players", nargs="+", default=["Alice", "Bob", "Carol"], help="Seat names")
    parser.add_argument(
        "--bots",
        nargs="*",
        default=None,
        help="Names played by the computer (omit the value to automate every seat)",
    )
    parser.add_argument("--balance", type=int, default=500, help="Starting balance for every player")
    parser.add_argument("--min-bet", type=int, default=5, help="Betting unit; the opening bet is twice this")
    parser.add_argument("--hands", type=int, default=1, help="Number of hands to play")
    parser.add_argument("--seed", type=int, default=None, help="Seed for seating and shuffles")
    parser.add_argument("--log-level", default="WARNING")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    for flag, value in (("--balance", args.balance), ("--min-bet", args.min_bet), ("--hands", args.hands)):
        if value <= 0:
            parser.error(f"{flag} must be a positive integer")
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING), format="%(message)s")

    if len(set(args.players)) != len(args.players):
        LOGGER.error("Player names must be unique")
        return 2

    config = TableConfig(min_bet=args.min_bet, starting_balance=args.balance)
    session = Session.from_names(args.players, config, seed=args.seed)

    # --bots with no names automates every seat.
    bot_names = set(args.players) if args.bots == [] else set(args.bots or ())
    agents: Dict[str, Agent] = {}
    for idx, name in enumerate(args.players):
        if name in bot_names:
            seed = None if args.seed is None else args.seed + idx + 1
            agents[name] = BotPlayer(name, min_bet=config.min_bet, seed=seed)
        else:
            agents[name] = ConsolePlayer(name)

    def show(events: List[Event]) -> None:
        for line in render_events(events):
            print(line)

    for _ in range(args.hands):
        if session.is_match_over():
            LOGGER.info("Not enough funded players for another hand")
            break
        engine = session.play_hand(agents, on_events=show)
        print(render_table(engine.view()))
        print()

    print("Standings:")
    for name, balance in session.standings().items():
        print(f"  {name:<12} {balance:>6}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
