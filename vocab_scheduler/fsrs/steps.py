"""
Learning and Relearning Steps

Implements the short-term phase of the item lifecycle.

New and lapsed items are shown again after short, sub-day waits
(the step sequence) until they graduate to the review state:

- AGAIN restarts the sequence at step 0
- HARD/GOOD advance one step; running off the end graduates
- EASY graduates immediately
- A failed review item drops into relearning at step 0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from vocab_scheduler.fsrs.constants import (
    FALLBACK_LEARNING_STEP_MINUTES,
    FALLBACK_RELEARNING_STEP_MINUTES,
    ItemState,
    Rating,
)
from vocab_scheduler.fsrs.params import FSRSParams


@dataclass(frozen=True)
class StepOutcome:
    """
    Lifecycle position after a review.

    wait_minutes is set while stepping and None once the item is in review.
    """
    state: ItemState
    step: Optional[int]
    wait_minutes: Optional[float]

    @property
    def graduated(self) -> bool:
        return self.state is ItemState.REVIEW


_REVIEW = StepOutcome(state=ItemState.REVIEW, step=None, wait_minutes=None)


def _restart(state: ItemState, steps: Sequence[float], fallback: float) -> StepOutcome:
    wait = steps[0] if steps else fallback
    return StepOutcome(state=state, step=0, wait_minutes=wait)


def _advance(state: ItemState, current_step: Optional[int], steps: Sequence[float]) -> StepOutcome:
    next_step = (current_step or 0) + 1
    if next_step >= len(steps):
        return _REVIEW
    return StepOutcome(state=state, step=next_step, wait_minutes=steps[next_step])


def next_step(
    state: ItemState,
    step: Optional[int],
    rating: Rating,
    params: FSRSParams
) -> StepOutcome:
    """
    Compute the lifecycle position after a review.

    Args:
        state: Current lifecycle state (UNSPECIFIED for new items)
        step: Current step index (None counts as 0)
        rating: Review grade
        params: Parameter set providing the step sequences

    Returns:
        StepOutcome with the new state, step and wait
    """
    if state is ItemState.REVIEW:
        if rating == Rating.AGAIN:
            return _restart(ItemState.RELEARNING, params.relearning_steps, FALLBACK_RELEARNING_STEP_MINUTES)
        return _REVIEW

    if state is ItemState.RELEARNING:
        steps = params.relearning_steps
        fallback = FALLBACK_RELEARNING_STEP_MINUTES
    else:
        # New items enter the learning sequence
        state = ItemState.LEARNING
        steps = params.learning_steps
        fallback = FALLBACK_LEARNING_STEP_MINUTES

    if rating == Rating.AGAIN:
        return _restart(state, steps, fallback)
    if rating == Rating.EASY:
        return _REVIEW
    return _advance(state, step, steps)
