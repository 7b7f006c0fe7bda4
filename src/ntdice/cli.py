from __future__ import annotations

import argparse
import logging
import sys

from ntdice.dice import parse_dice
from ntdice.errors import InputValidationError, RandomnessUnavailableError
from ntdice.game import DiceGame
from ntdice.logging_utils import configure_logging
from ntdice.settings import (
    LOG_LEVELS,
    GameSettings,
    default_first_pick,
    default_log_level,
    default_precision,
)
from ntdice.strategy import FIRST_PICKS

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="ntdice",
        description="Non-transitive dice game with provably fair commit-reveal rolls",
    )
    parser.add_argument("dice", nargs="*", help="Die faces as comma-separated integers, e.g. 2,2,4,4,9,9")
    parser.add_argument(
        "--first-pick",
        choices=FIRST_PICKS,
        default=None,
        help="How the computer picks a die when it moves first (env NTDICE_FIRST_PICK, default lowest)",
    )
    parser.add_argument(
        "--precision",
        type=int,
        default=None,
        help="Decimals shown in the probability table (env NTDICE_PRECISION, default 4)",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help="Logging level, written to stderr (env NTDICE_LOG_LEVEL, default WARNING)",
    )
    parser.add_argument("--once", action="store_true", help="Play a single round without asking to continue")

    # Die specs such as "-1,2,3" look like options to argparse; collect them
    # as dice so they get the face validation message instead.
    args, extra = parser.parse_known_args(argv)
    unknown = [e for e in extra if e.startswith("--") or not any(c.isdigit() for c in e)]
    if unknown:
        parser.error(f"unrecognized arguments: {' '.join(unknown)}")

    try:
        settings = GameSettings(
            first_pick=args.first_pick or default_first_pick(),  # type: ignore[arg-type]
            precision=args.precision if args.precision is not None else default_precision(),
            log_level=args.log_level or default_log_level(),
            once=args.once,
        )
    except ValueError as exc:
        parser.error(str(exc))
    configure_logging(settings.log_level)

    try:
        dice = parse_dice(args.dice + extra)
    except InputValidationError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    logger.info("starting game with %d dice", len(dice))
    game = DiceGame(dice, settings=settings)
    try:
        scoreboard = game.run()
    except RandomnessUnavailableError as exc:
        print(f"Fatal: {exc}", file=sys.stderr)
        return 2

    print("\nScores:\n" + scoreboard.format_table())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
