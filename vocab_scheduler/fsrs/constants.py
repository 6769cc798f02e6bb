"""
FSRS Constants and Parameters

Grades, lifecycle states, forgetting-curve constants and the default
parameter set in one place. Defaults mirror the FSRS-4.5 weights.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Final

from vocab_scheduler.fsrs.errors import InvalidGradeError


# ---- Review Grades ----

class Rating(IntEnum):
    """Learner's self-reported recall outcome."""
    AGAIN = 1   # Retrieval failed
    HARD = 2    # Retrieved with high effort
    GOOD = 3    # Retrieved normally
    EASY = 4    # Retrieved fluently


RATING_LABELS: Final[dict[str, Rating]] = {
    "again": Rating.AGAIN,
    "hard": Rating.HARD,
    "good": Rating.GOOD,
    "easy": Rating.EASY,
}


def parse_rating(grade: Any) -> Rating:
    """
    Validate a review grade.

    Args:
        grade: Rating member, integer 1-4, or label ("again", "hard", "good", "easy")

    Returns:
        Matching Rating

    Raises:
        InvalidGradeError: If the grade is not one of the four recognized values
    """
    if isinstance(grade, Rating):
        return grade
    if isinstance(grade, str):
        rating = RATING_LABELS.get(grade.strip().lower())
        if rating is None:
            raise InvalidGradeError(grade)
        return rating
    # bool is an int subclass; True must not pass as AGAIN
    if isinstance(grade, int) and not isinstance(grade, bool):
        try:
            return Rating(grade)
        except ValueError:
            raise InvalidGradeError(grade) from None
    raise InvalidGradeError(grade)


# ---- Lifecycle States ----

class ItemState(Enum):
    """
    Lifecycle state of a study item.

    UNSPECIFIED stands for "no state yet" and is how new items are
    represented; it is also what unrecognized input collapses to.
    """
    LEARNING = "learning"
    REVIEW = "review"
    RELEARNING = "relearning"
    UNSPECIFIED = "unspecified"

    @classmethod
    def parse(cls, value: Any) -> "ItemState":
        """
        Normalize a stored or user-supplied state value.

        Accepts members, their text values (any case, surrounding whitespace
        ignored) or anything else. Never raises.

        Args:
            value: Raw state value

        Returns:
            Matching ItemState, or UNSPECIFIED if unrecognized
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return cls.UNSPECIFIED
        return cls.UNSPECIFIED

    @property
    def is_stepping(self) -> bool:
        return self in (ItemState.LEARNING, ItemState.RELEARNING)


# ---- Forgetting Curve ----

DECAY: Final[float] = -0.5
FACTOR: Final[float] = 0.9 ** (1 / DECAY) - 1  # 19/81, so R == 0.9 when t == S

# Same-day reviews are treated as near-certain recall
SAME_DAY_RETRIEVABILITY: Final[float] = 0.99


# ---- Memory Bounds ----

S_MIN: Final[float] = 0.1   # Minimum stability (days)
D_MIN: Final[float] = 1.0   # Minimum difficulty
D_MAX: Final[float] = 10.0  # Maximum difficulty

R_TARGET: Final[float] = 0.70  # Retrievability at which a word counts as known

MIN_WEIGHTS: Final[int] = 17


# ---- Default Parameter Set ----

DEFAULT_WEIGHTS: Final[tuple[float, ...]] = (
    0.40255,   # w0: initial stability for AGAIN
    1.18385,   # w1: initial stability for HARD
    3.173,     # w2: initial stability for GOOD
    15.69105,  # w3: initial stability for EASY
    7.1949,    # w4: initial difficulty for GOOD
    0.5345,    # w5: initial difficulty slope per grade
    1.4604,    # w6: difficulty change per grade
    0.0046,    # w7: difficulty mean reversion
    1.54575,   # w8: recall stability scale (exp)
    0.1192,    # w9: recall stability saturation
    1.01925,   # w10: recall stability gain from low R
    1.9395,    # w11: post-lapse stability scale
    0.11,      # w12: post-lapse difficulty exponent
    0.29605,   # w13: post-lapse stability exponent
    2.2698,    # w14: post-lapse gain from low R
    0.2315,    # w15: hard penalty
    2.9898,    # w16: easy bonus
    0.51655,   # w17: short-term (unused)
    0.6621,    # w18: short-term (unused)
)

DEFAULT_DESIRED_RETENTION: Final[float] = 0.9
DEFAULT_LEARNING_STEPS: Final[tuple[float, ...]] = (1.0, 10.0)   # minutes
DEFAULT_RELEARNING_STEPS: Final[tuple[float, ...]] = (10.0,)     # minutes
DEFAULT_MAXIMUM_INTERVAL: Final[int] = 36_500                    # days
DEFAULT_ENABLE_FUZZING: Final[bool] = True

# Waits used when a step sequence is configured empty
FALLBACK_LEARNING_STEP_MINUTES: Final[float] = 1.0
FALLBACK_RELEARNING_STEP_MINUTES: Final[float] = 10.0


# ---- Interval Fuzzing ----
# (start_days, end_days, factor): the band widens with interval length

FUZZ_MIN_INTERVAL: Final[float] = 2.5
FUZZ_RANGES: Final[tuple[tuple[float, float, float], ...]] = (
    (2.5, 7.0, 0.15),
    (7.0, 20.0, 0.10),
    (20.0, float("inf"), 0.05),
)
