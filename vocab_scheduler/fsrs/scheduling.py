"""
Scheduling - Intervals and Due Dates

Turns stability into a review interval and an interval into a due date.

- The interval inverts the forgetting curve at the desired retention
- Intervals are clamped to [1, maximum_interval] days
- Optional fuzzing spreads items with equal intervals over nearby days,
  so cohorts learned together do not all come due on the same day
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import Optional

from vocab_scheduler.fsrs.constants import DECAY, FACTOR, FUZZ_MIN_INTERVAL, FUZZ_RANGES
from vocab_scheduler.fsrs.params import FSRSParams


def clamp_interval(interval: int, params: FSRSParams) -> int:
    return max(1, min(params.maximum_interval, interval))


def next_interval(stability: float, params: FSRSParams) -> int:
    """
    Days until recall probability falls to the desired retention.

    Formula: I = S / FACTOR * (R_desired^(1/DECAY) - 1)

    With the default retention of 0.9 the interval equals the stability.

    Args:
        stability: Stability in days
        params: Parameter set (desired_retention, maximum_interval)

    Returns:
        Whole days, clamped to [1, maximum_interval]
    """
    interval = stability / FACTOR * (params.desired_retention ** (1 / DECAY) - 1)
    return clamp_interval(round(interval), params)


def fuzz_range(interval: int, params: FSRSParams) -> tuple[int, int]:
    """
    Inclusive (min, max) day range a fuzzed interval may land in.

    The half-width is 1 day plus 15% of the part of the interval between
    2.5 and 7 days, 10% of the part between 7 and 20 and 5% beyond 20.
    """
    delta = 1.0
    for start, end, factor in FUZZ_RANGES:
        delta += factor * max(min(interval, end) - start, 0.0)

    min_ivl = max(2, round(interval - delta))
    max_ivl = min(round(interval + delta), params.maximum_interval)
    return min(min_ivl, max_ivl), max_ivl


def fuzz_interval(
    interval: int,
    params: FSRSParams,
    rng: Optional[random.Random] = None
) -> int:
    """
    Randomly perturb an interval within its fuzz band.

    Intervals shorter than 2.5 days are returned unchanged.

    Args:
        interval: Clamped interval in days
        params: Parameter set (maximum_interval)
        rng: Randomness source (defaults to the module-level generator)

    Returns:
        Fuzzed interval, clamped to [1, maximum_interval]
    """
    if interval < FUZZ_MIN_INTERVAL:
        return interval

    rng = rng or random
    low, high = fuzz_range(interval, params)
    return clamp_interval(rng.randint(low, high), params)


def review_interval(
    stability: float,
    params: FSRSParams,
    rng: Optional[random.Random] = None
) -> int:
    """Interval for an item in the review state, fuzzed when enabled."""
    interval = next_interval(stability, params)
    if params.enable_fuzzing:
        interval = fuzz_interval(interval, params, rng)
    return interval


def due_after_minutes(now: datetime, minutes: float) -> datetime:
    return now + timedelta(seconds=int(minutes * 60))


def due_after_days(now: datetime, days: int) -> datetime:
    return now + timedelta(days=days)
