"""
Memory Updates

Implements the stability and difficulty updates applied on every review.

Key principles:
- The first review seeds stability and difficulty from the grade alone
- Success grows stability, most when recall was least likely (low R)
- Failure collapses stability to a post-lapse value, never above the old one
- Difficulty drifts with the grade and reverts slightly toward the mean

Formulas follow FSRS-4.5; `w` is the weight vector from FSRSParams.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

from vocab_scheduler.fsrs.constants import (
    D_MAX,
    D_MIN,
    S_MIN,
    Rating,
)


def _clamp_difficulty(difficulty: float) -> float:
    return max(D_MIN, min(D_MAX, difficulty))


def initial_stability(rating: Rating, w: Sequence[float]) -> float:
    """
    Stability after the very first review.

    Formula: S0(G) = w[G-1]
    """
    return max(S_MIN, w[int(rating) - 1])


def initial_difficulty(rating: Rating, w: Sequence[float]) -> float:
    """
    Difficulty after the very first review.

    Formula: D0(G) = w[4] - (G - 3) * w[5], clipped to [1, 10]
    """
    return _clamp_difficulty(w[4] - (int(rating) - 3) * w[5])


def update_difficulty(difficulty: float, rating: Rating, w: Sequence[float]) -> float:
    """
    Update difficulty based on the review grade.

    Formula:
        D' = D - w[6] * (G - 3)
        D_new = clip(w[7] * D0(GOOD) + (1 - w[7]) * D', min=1, max=10)

    AGAIN and HARD raise difficulty, EASY lowers it, GOOD leaves it to the
    mean-reversion term.

    Args:
        difficulty: Current difficulty
        rating: Review grade
        w: Weight vector

    Returns:
        New difficulty value (clipped to [1, 10])
    """
    shifted = difficulty - w[6] * (int(rating) - 3)
    reverted = w[7] * initial_difficulty(Rating.GOOD, w) + (1 - w[7]) * shifted
    return _clamp_difficulty(reverted)


def update_stability_on_success(
    stability: float,
    difficulty: float,
    retrievability: float,
    rating: Rating,
    w: Sequence[float]
) -> float:
    """
    Update stability after successful retrieval (Hard/Good/Easy).

    Formula:
        S' = S * (1 + e^w[8] * (11 - D) * S^-w[9] * (e^(w[10] * (1 - R)) - 1) * hp * eb)

    Where:
        - hp = w[15] for HARD, otherwise 1 (hard penalty)
        - eb = w[16] for EASY, otherwise 1 (easy bonus)
        - (e^(w[10] * (1 - R)) - 1) rewards well-spaced, risky success

    Args:
        stability: Current stability (S)
        difficulty: Current difficulty (D)
        retrievability: Retrievability at review time (R)
        rating: HARD, GOOD or EASY
        w: Weight vector

    Returns:
        New stability value
    """
    if rating == Rating.AGAIN:
        raise ValueError("Use update_stability_on_failure for AGAIN feedback")

    hard_penalty = w[15] if rating == Rating.HARD else 1.0
    easy_bonus = w[16] if rating == Rating.EASY else 1.0

    growth = (
        math.exp(w[8])
        * (11 - difficulty)
        * math.pow(stability, -w[9])
        * (math.exp(w[10] * (1 - retrievability)) - 1)
        * hard_penalty
        * easy_bonus
    )

    return max(S_MIN, stability * (1 + growth))


def update_stability_on_failure(
    stability: float,
    difficulty: float,
    retrievability: float,
    w: Sequence[float]
) -> float:
    """
    Post-lapse stability after failed retrieval (Again).

    Formula:
        S' = min(S, w[11] * D^-w[12] * ((S + 1)^w[13] - 1) * e^(w[14] * (1 - R)))

    Floored at S_MIN so stability never reaches zero.

    Args:
        stability: Current stability
        difficulty: Current difficulty
        retrievability: Retrievability at review time

    Returns:
        New stability value (reduced)
    """
    post_lapse = (
        w[11]
        * math.pow(difficulty, -w[12])
        * (math.pow(stability + 1, w[13]) - 1)
        * math.exp(w[14] * (1 - retrievability))
    )

    return max(S_MIN, min(stability, post_lapse))


def apply_memory_update(
    stability: Optional[float],
    difficulty: Optional[float],
    retrievability: float,
    rating: Rating,
    w: Sequence[float]
) -> Tuple[float, float]:
    """
    Apply update rules to get the new (stability, difficulty).

    This is the main entry point for memory updates. Items without a
    stability or difficulty yet are initialized from the grade.

    Args:
        stability: Current stability, or None before the first review
        difficulty: Current difficulty, or None before the first review
        retrievability: Retrievability at review time
        rating: Review grade
        w: Weight vector

    Returns:
        (new_stability, new_difficulty)
    """
    if stability is None or difficulty is None:
        return initial_stability(rating, w), initial_difficulty(rating, w)

    # Stability uses the pre-review difficulty
    if rating == Rating.AGAIN:
        new_stability = update_stability_on_failure(stability, difficulty, retrievability, w)
    else:
        new_stability = update_stability_on_success(stability, difficulty, retrievability, rating, w)

    new_difficulty = update_difficulty(difficulty, rating, w)

    return new_stability, new_difficulty
