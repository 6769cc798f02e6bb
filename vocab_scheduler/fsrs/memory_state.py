"""
Memory State - FSRS Item State and Retrievability

Defines the per-item memory state and its derived quantities.

Key concepts:
- Stability (S): Days until recall probability decays to 90%
- Difficulty (D): How hard the item is to learn (1-10 scale)
- Retrievability (R): Probability of successful recall at time t

Derived fields (elapsed_days, retrievability) are cached on the item but are
always recomputed for the caller's reference time.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Tuple

from vocab_scheduler.fsrs.constants import (
    DECAY,
    FACTOR,
    SAME_DAY_RETRIEVABILITY,
    ItemState,
)
from vocab_scheduler.fsrs.errors import MalformedItemError


_SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class Item:
    """
    Memory state for one (user, word) pair.

    Values are immutable: every review or recomputation returns a new Item.
    """
    user_id: Any
    word_id: Any

    # Memory parameters (absent until the first review)
    stability: Optional[float] = None  # S, in days
    difficulty: Optional[float] = None  # D, range 1-10
    retrievability: Optional[float] = None  # cached, as of the last computation

    # Scheduling
    elapsed_days: Optional[int] = None  # cached, as of the last computation
    interval: Optional[int] = None  # days until due (0 while stepping)
    step: Optional[int] = None  # index into learning/relearning steps
    due: Optional[datetime] = None
    last_reviewed_at: Optional[datetime] = None
    last_quality: Optional[int] = None

    state: ItemState = ItemState.UNSPECIFIED

    def __post_init__(self):
        if self.user_id is None or self.word_id is None:
            raise MalformedItemError(
                f"Item requires user_id and word_id (got user_id={self.user_id!r}, word_id={self.word_id!r})"
            )
        for name in ("stability", "difficulty"):
            value = getattr(self, name)
            if value is None:
                continue
            try:
                object.__setattr__(self, name, float(value))
            except (TypeError, ValueError):
                raise MalformedItemError(f"{name} must be a number, got {value!r}") from None
        if self.stability is not None and not self.stability > 0:
            raise MalformedItemError(f"stability must be positive, got {self.stability!r}")
        object.__setattr__(self, "state", ItemState.parse(self.state))

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Item":
        """
        Build an Item from a stored record or any mapping of field names.

        `due_date` takes priority over `due`; the state is normalized and
        unrecognized values become UNSPECIFIED.

        Raises:
            MalformedItemError: If user_id or word_id is missing
        """
        missing = [key for key in ("user_id", "word_id") if record.get(key) is None]
        if missing:
            raise MalformedItemError(f"Record is missing required field(s): {', '.join(missing)}")

        due = record.get("due_date")
        if due is None:
            due = record.get("due")

        return cls(
            user_id=record["user_id"],
            word_id=record["word_id"],
            stability=record.get("stability"),
            difficulty=record.get("difficulty"),
            retrievability=record.get("retrievability"),
            elapsed_days=record.get("elapsed_days"),
            interval=record.get("interval"),
            step=record.get("step"),
            due=due,
            last_reviewed_at=record.get("last_reviewed_at"),
            last_quality=record.get("last_quality"),
            state=ItemState.parse(record.get("state")),
        )

    @classmethod
    def new(cls, user_id: Any, word_id: Any, now: datetime) -> "Item":
        """A never-reviewed item, due immediately."""
        return cls(user_id=user_id, word_id=word_id, due=now)

    @property
    def is_new(self) -> bool:
        return self.state is ItemState.UNSPECIFIED

    def to_record(self) -> dict:
        """Flat dict for a storage collaborator (state encoded as text)."""
        record = dataclasses.asdict(self)
        record["state"] = None if self.is_new else self.state.value
        return record


def whole_days_between(start: datetime, end: datetime) -> int:
    """Whole days from start to end, never negative."""
    seconds = (end - start).total_seconds()
    return max(0, int(seconds // _SECONDS_PER_DAY))


def calculate_retrievability(stability: float, elapsed_days: float) -> float:
    """
    Calculate retrievability using the FSRS power-law forgetting curve.

    Formula: R = (1 + FACTOR * t / S) ^ DECAY

    Where:
    - t = elapsed days since the last review
    - S = stability (in days)
    - DECAY = -0.5, FACTOR = 0.9^(1/DECAY) - 1

    The constants make R exactly 0.9 when t == S.

    Args:
        stability: Current stability in days (must be positive)
        elapsed_days: Days since the last review

    Returns:
        Retrievability between 0 and 1
    """
    return (1 + FACTOR * elapsed_days / stability) ** DECAY


def elapsed_days(item: Item, now: datetime) -> Tuple[Item, int]:
    """
    Whole days since the item was last reviewed, as of `now`.

    Always recomputes; a previously cached elapsed_days is ignored.
    A reference time before last_reviewed_at clamps to 0.

    Args:
        item: Item to inspect
        now: Reference time

    Returns:
        (item with elapsed_days cached, elapsed days)
    """
    if item.last_reviewed_at is None:
        return item, 0

    days = whole_days_between(item.last_reviewed_at, now)
    if item.elapsed_days != days:
        item = dataclasses.replace(item, elapsed_days=days)
    return item, days


def retrievability(item: Item, now: datetime) -> Tuple[Item, float]:
    """
    Probability of recall as of `now`.

    - No stability yet (new item): 0.0
    - Reviewed today (elapsed 0): 0.99
    - Otherwise: power-law forgetting curve

    Args:
        item: Item to inspect
        now: Reference time

    Returns:
        (item with elapsed_days and retrievability cached, retrievability)
    """
    item, days = elapsed_days(item, now)

    if item.stability is None:
        r = 0.0
    elif days == 0:
        r = SAME_DAY_RETRIEVABILITY
    else:
        r = calculate_retrievability(item.stability, days)

    if item.retrievability != r:
        item = dataclasses.replace(item, retrievability=r)
    return item, r
