"""
FSRS - Free Spaced Repetition Scheduler

Main API for scheduling vocabulary reviews.

This package implements the FSRS memory model:
- Power-law forgetting curve: R = (1 + FACTOR * t/S) ^ -0.5
- Interpretable memory state (Stability, Difficulty, Retrievability)
- Learning / review / relearning lifecycle with sub-day steps
- Intervals derived from a target retention, with optional fuzzing

Quick start:
    from datetime import datetime, timezone
    from vocab_scheduler import fsrs

    now = datetime.now(timezone.utc)
    item = fsrs.Item.new(user_id=1, word_id=42, now=now)

    # Pure transition, no I/O
    item = fsrs.review(item, fsrs.Rating.GOOD, now, fsrs.FSRSParams())

    # Retrievability as of any reference time
    item, r = fsrs.retrievability(item, now)
"""

# Core scheduler API (algorithm logic)
from vocab_scheduler.fsrs.scheduler import process_review, review

# Constants and parameters
from vocab_scheduler.fsrs.constants import (
    D_MAX,
    D_MIN,
    DECAY,
    FACTOR,
    R_TARGET,
    S_MIN,
    ItemState,
    Rating,
    parse_rating,
)
from vocab_scheduler.fsrs.errors import InvalidGradeError, MalformedItemError
from vocab_scheduler.fsrs.params import FSRSParams

# Memory state
from vocab_scheduler.fsrs.memory_state import (
    Item,
    calculate_retrievability,
    elapsed_days,
    retrievability,
)

# Intervals
from vocab_scheduler.fsrs.scheduling import fuzz_interval, next_interval


__all__ = [
    # Core algorithm
    "review",
    "process_review",

    # Enums
    "Rating",
    "ItemState",
    "parse_rating",

    # Errors
    "InvalidGradeError",
    "MalformedItemError",

    # Memory state
    "Item",
    "calculate_retrievability",
    "elapsed_days",
    "retrievability",

    # Intervals
    "next_interval",
    "fuzz_interval",

    # Parameters
    "FSRSParams",
    "DECAY",
    "FACTOR",
    "R_TARGET",
    "S_MIN",
    "D_MIN",
    "D_MAX",
]
