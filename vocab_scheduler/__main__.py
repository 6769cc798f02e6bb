"""
Command-line tools for inspecting the scheduler.

Examples:
    python -m vocab_scheduler simulate --grades 3 3 1 3 --seed 7
    python -m vocab_scheduler retrievability --stability 5 --days 5
"""

from __future__ import annotations

import argparse
import random
import sys
from datetime import datetime, timezone

from dotenv import load_dotenv

from vocab_scheduler import fsrs
from vocab_scheduler.config import get_fsrs_params
from vocab_scheduler.logging import configure_logging


def _parse_start(value: str) -> datetime:
    start = datetime.fromisoformat(value)
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    return start


def simulate(grades: list[str], start: datetime, seed: int | None, no_fuzz: bool) -> None:
    """
    Replay a sequence of grades for one item, reviewing whenever it is due.
    """
    params = get_fsrs_params()
    if no_fuzz:
        params = params.with_overrides(enable_fuzzing=False)
    rng = random.Random(seed)

    item = fsrs.Item.new(user_id="cli", word_id="word", now=start)
    now = start

    print("=" * 78)
    print(f"{'#':>3}  {'grade':<6} {'state':<11} {'step':>4} {'stability':>10} "
          f"{'difficulty':>10} {'interval':>8}  due")
    print("-" * 78)

    for index, grade in enumerate(grades, start=1):
        item = fsrs.review(item, grade, now, params, rng)
        step = "-" if item.step is None else str(item.step)
        print(f"{index:>3}  {fsrs.parse_rating(grade).name.lower():<6} {item.state.value:<11} "
              f"{step:>4} {item.stability:>10.2f} {item.difficulty:>10.2f} "
              f"{item.interval:>8}  {item.due.isoformat()}")
        now = item.due

    print("=" * 78)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    configure_logging()

    parser = argparse.ArgumentParser(
        prog="vocab_scheduler",
        description="Inspect FSRS scheduling decisions"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    simulate_parser = subparsers.add_parser(
        "simulate",
        help="Replay a grade sequence for a single item"
    )
    simulate_parser.add_argument(
        "--grades",
        nargs="+",
        required=True,
        help="Grades to apply in order (1-4 or again/hard/good/easy)"
    )
    simulate_parser.add_argument(
        "--start",
        type=_parse_start,
        default=None,
        help="ISO timestamp of the first review (default: now, UTC)"
    )
    simulate_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for interval fuzzing"
    )
    simulate_parser.add_argument(
        "--no-fuzz",
        action="store_true",
        help="Disable interval fuzzing"
    )

    curve_parser = subparsers.add_parser(
        "retrievability",
        help="Evaluate the forgetting curve"
    )
    curve_parser.add_argument("--stability", type=float, required=True, help="Stability in days")
    curve_parser.add_argument("--days", type=float, required=True, help="Elapsed days")

    args = parser.parse_args(argv)

    if args.command == "simulate":
        grades = [int(g) if g.isdigit() else g for g in args.grades]
        # Grades are validated before any review is applied
        try:
            for grade in grades:
                fsrs.parse_rating(grade)
        except fsrs.InvalidGradeError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
        start = args.start or datetime.now(timezone.utc)
        simulate(grades, start, args.seed, args.no_fuzz)
        return 0

    if args.stability <= 0:
        print("error: --stability must be positive", file=sys.stderr)
        return 2
    r = fsrs.calculate_retrievability(args.stability, max(0.0, args.days))
    print(f"R = {r:.4f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
