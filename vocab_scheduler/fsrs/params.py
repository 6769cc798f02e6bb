"""
Scheduler parameter set.

Loaded once at startup (see vocab_scheduler.config) and read-only afterwards.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Iterable

from vocab_scheduler.fsrs.constants import (
    DEFAULT_DESIRED_RETENTION,
    DEFAULT_ENABLE_FUZZING,
    DEFAULT_LEARNING_STEPS,
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_RELEARNING_STEPS,
    DEFAULT_WEIGHTS,
    MIN_WEIGHTS,
)


def _as_float_tuple(values: Iterable[float], name: str) -> tuple[float, ...]:
    try:
        return tuple(float(v) for v in values)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a sequence of numbers") from exc


@dataclass(frozen=True)
class FSRSParams:
    """
    Global FSRS configuration.

    Attributes:
        weights: Ordered weight vector (at least 17 values)
        desired_retention: Target recall probability, strictly between 0 and 1
        learning_steps: Learning-phase step durations in minutes
        relearning_steps: Relearning-phase step durations in minutes
        maximum_interval: Longest interval ever scheduled, in days
        enable_fuzzing: Randomly perturb review intervals
    """
    weights: tuple[float, ...] = DEFAULT_WEIGHTS
    desired_retention: float = DEFAULT_DESIRED_RETENTION
    learning_steps: tuple[float, ...] = DEFAULT_LEARNING_STEPS
    relearning_steps: tuple[float, ...] = DEFAULT_RELEARNING_STEPS
    maximum_interval: int = DEFAULT_MAXIMUM_INTERVAL
    enable_fuzzing: bool = field(default=DEFAULT_ENABLE_FUZZING)

    def __post_init__(self):
        # Normalize lists from config into tuples so the instance stays hashable
        object.__setattr__(self, "weights", _as_float_tuple(self.weights, "weights"))
        object.__setattr__(self, "learning_steps", _as_float_tuple(self.learning_steps, "learning_steps"))
        object.__setattr__(self, "relearning_steps", _as_float_tuple(self.relearning_steps, "relearning_steps"))

        if len(self.weights) < MIN_WEIGHTS:
            raise ValueError(
                f"weights must have at least {MIN_WEIGHTS} elements, got {len(self.weights)}"
            )
        if not 0.0 < self.desired_retention < 1.0:
            raise ValueError(
                f"desired_retention must be between 0 and 1 (exclusive), got {self.desired_retention}"
            )
        for name in ("learning_steps", "relearning_steps"):
            if any(minutes <= 0 for minutes in getattr(self, name)):
                raise ValueError(f"{name} must contain positive durations")
        if isinstance(self.maximum_interval, bool) or int(self.maximum_interval) != self.maximum_interval:
            raise ValueError(f"maximum_interval must be an integer, got {self.maximum_interval!r}")
        if self.maximum_interval < 1:
            raise ValueError(f"maximum_interval must be >= 1, got {self.maximum_interval}")
        object.__setattr__(self, "maximum_interval", int(self.maximum_interval))
        object.__setattr__(self, "enable_fuzzing", bool(self.enable_fuzzing))

    def with_overrides(self, **overrides) -> "FSRSParams":
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **overrides)
