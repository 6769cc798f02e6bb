"""
Constants for vocabulary-level analytics.
"""

from __future__ import annotations

from typing import Final


CEFR_LEVELS: Final[list[str]] = ["A1", "A2", "B1", "B2", "C1", "C2"]

# Frequency-rank band (lower bound, upper bound) for each CEFR level
FREQUENCY_BANDS: Final[list[tuple[int, int]]] = [
    (0, 1_000),
    (1_000, 2_000),
    (2_000, 4_000),
    (4_000, 8_000),
    (8_000, 16_000),
    (16_000, 32_000),
]

MIN_NUMERIC_LEVEL: Final[float] = 1.0
MAX_NUMERIC_LEVEL: Final[float] = float(len(CEFR_LEVELS))

# Share of known words at or below the rank used to place the learner
LEVEL_PERCENTILE: Final[float] = 0.8

LEVEL_CACHE_NAMESPACE: Final[str] = "level"

SNAPSHOT_COLUMNS: Final[list[str]] = [
    "word_id",
    "state",
    "stability",
    "retrievability",
    "frequency_rank",
]
