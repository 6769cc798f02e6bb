"""
Scheduler - FSRS Algorithm Logic

Pure FSRS scheduling and state updates (no database calls).

Main workflow:
1. Load item state (caller's responsibility)
2. Validate the grade
3. Calculate retrievability as of the review time
4. Update stability and difficulty
5. Move through the learning/review/relearning lifecycle
6. Return the updated item (+ event data dict)

This module handles ONLY the algorithm logic.
Persisting the item and the event is the caller's job.
"""

from __future__ import annotations

import dataclasses
import random
from datetime import datetime, timezone
from typing import Any, Optional, Tuple

from vocab_scheduler.fsrs import memory_state, memory_updates, scheduling, steps
from vocab_scheduler.fsrs.constants import SAME_DAY_RETRIEVABILITY, Rating, parse_rating
from vocab_scheduler.fsrs.params import FSRSParams
from vocab_scheduler.logging import get_logger


logger = get_logger(__name__)


def review(
    item: memory_state.Item,
    grade: Any,
    now: datetime,
    params: FSRSParams,
    rng: Optional[random.Random] = None
) -> memory_state.Item:
    """
    Apply one graded review to an item.

    Args:
        item: Current item state (new or existing)
        grade: Review grade (1-4, Rating, or label)
        now: Review timestamp
        params: Scheduler parameter set
        rng: Randomness source for interval fuzzing

    Returns:
        New Item; the input is left untouched

    Raises:
        InvalidGradeError: If the grade is not recognized (nothing is computed)
    """
    updated, _ = _apply_review(item, parse_rating(grade), now, params, rng)
    return updated


def _apply_review(
    item: memory_state.Item,
    rating: Rating,
    now: datetime,
    params: FSRSParams,
    rng: Optional[random.Random]
) -> Tuple[memory_state.Item, float]:
    """Review with an already validated rating; also returns R before the review."""
    _, retrievability = memory_state.retrievability(item, now)

    new_stability, new_difficulty = memory_updates.apply_memory_update(
        stability=item.stability,
        difficulty=item.difficulty,
        retrievability=retrievability,
        rating=rating,
        w=params.weights,
    )

    outcome = steps.next_step(item.state, item.step, rating, params)

    if outcome.graduated:
        interval = scheduling.review_interval(new_stability, params, rng)
        due = scheduling.due_after_days(now, interval)
    else:
        interval = 0
        due = scheduling.due_after_minutes(now, outcome.wait_minutes)

    logger.debug(
        "fsrs.review",
        user_id=item.user_id,
        word_id=item.word_id,
        rating=rating.name,
        state_before=item.state.value,
        state_after=outcome.state.value,
        step=outcome.step,
        interval=interval,
    )

    updated = dataclasses.replace(
        item,
        stability=new_stability,
        difficulty=new_difficulty,
        retrievability=SAME_DAY_RETRIEVABILITY,
        elapsed_days=0,
        interval=interval,
        step=outcome.step,
        due=due,
        last_reviewed_at=now,
        last_quality=int(rating),
        state=outcome.state,
    )
    return updated, retrievability


def process_review(
    item: memory_state.Item,
    grade: Any,
    now: Optional[datetime] = None,
    params: Optional[FSRSParams] = None,
    rng: Optional[random.Random] = None
) -> Tuple[memory_state.Item, dict]:
    """
    Process a review and return updated item state + event data.

    Caller is responsible for:
    1. Loading the item
    2. Saving the item after review
    3. Persisting the event

    Args:
        item: Item to update (may be new or existing)
        grade: Review grade (AGAIN, HARD, GOOD, EASY)
        now: Review timestamp (defaults to now, UTC)
        params: Parameter set (defaults to the configured one)
        rng: Randomness source for interval fuzzing

    Returns:
        Tuple of (updated_item, event_data_dict)
    """
    if now is None:
        now = datetime.now(timezone.utc)
    if params is None:
        from vocab_scheduler.config import get_fsrs_params
        params = get_fsrs_params()

    rating = parse_rating(grade)
    updated, retrievability_before = _apply_review(item, rating, now, params, rng)

    event_data = {
        'user_id': item.user_id,
        'word_id': item.word_id,
        'timestamp': now,
        'grade': int(rating),
        'state_before': None if item.is_new else item.state.value,
        'state_after': updated.state.value,
        'stability_before': item.stability,
        'difficulty_before': item.difficulty,
        'retrievability_before': None if item.stability is None else retrievability_before,
        'stability_after': updated.stability,
        'difficulty_after': updated.difficulty,
        'interval': updated.interval,
        'due': updated.due,
    }

    return updated, event_data
