"""
Metric computations for the vocabulary-level aggregate.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

import pandas as pd

from vocab_scheduler import fsrs
from vocab_scheduler.analytics.constants import (
    CEFR_LEVELS,
    FREQUENCY_BANDS,
    LEVEL_PERCENTILE,
    MAX_NUMERIC_LEVEL,
    MIN_NUMERIC_LEVEL,
    SNAPSHOT_COLUMNS,
)
from vocab_scheduler.analytics.types import VocabularyLevel


def build_item_snapshots_df(
    items: Iterable[fsrs.Item],
    frequency_ranks: Mapping[Any, Optional[int]],
    now: datetime
) -> pd.DataFrame:
    """
    One row per item with retrievability recomputed as of `now`.
    """
    rows = []
    for item in items:
        _, r = fsrs.retrievability(item, now)
        rows.append({
            "word_id": item.word_id,
            "state": None if item.is_new else item.state.value,
            "stability": item.stability,
            "retrievability": r,
            "frequency_rank": frequency_ranks.get(item.word_id),
        })

    if not rows:
        return pd.DataFrame(columns=SNAPSHOT_COLUMNS)

    df = pd.DataFrame(rows, columns=SNAPSHOT_COLUMNS)
    df["retrievability"] = df["retrievability"].astype("float64")
    df["frequency_rank"] = pd.to_numeric(df["frequency_rank"], errors="coerce")
    return df


def numeric_level_for_rank(rank: float) -> float:
    """
    Map a word-frequency rank onto the 1.0-6.0 scale.

    Each CEFR band covers one level; ranks are interpolated linearly
    inside their band.
    """
    for index, (low, high) in enumerate(FREQUENCY_BANDS):
        if rank < high:
            fraction = (max(rank, low) - low) / (high - low)
            return min(MAX_NUMERIC_LEVEL, MIN_NUMERIC_LEVEL + index + fraction)
    return MAX_NUMERIC_LEVEL


def cefr_for_numeric_level(numeric_level: float) -> str:
    index = int(numeric_level) - 1
    return CEFR_LEVELS[max(0, min(index, len(CEFR_LEVELS) - 1))]


def compute_known_words(snapshots_df: pd.DataFrame, r_target: float) -> pd.DataFrame:
    """
    Rows whose retrievability is at or above the threshold.
    """
    if snapshots_df.empty:
        return snapshots_df
    return snapshots_df[snapshots_df["retrievability"] >= r_target]


def compute_vocabulary_level(snapshots_df: pd.DataFrame, r_target: float) -> VocabularyLevel:
    """
    Place the learner on the CEFR scale from the words they currently know.

    Uses the 80th-percentile frequency rank of known words that have a
    rank; no such words means A1 / 1.0.
    """
    if snapshots_df.empty:
        return VocabularyLevel(cefr_level=CEFR_LEVELS[0], numeric_level=MIN_NUMERIC_LEVEL,
                               known_words=0, tracked_words=0)

    tracked = int(snapshots_df["word_id"].nunique())
    known = compute_known_words(snapshots_df, r_target)
    ranked = known.dropna(subset=["frequency_rank"])

    if ranked.empty:
        numeric_level = MIN_NUMERIC_LEVEL
    else:
        rank = float(ranked["frequency_rank"].quantile(LEVEL_PERCENTILE))
        numeric_level = round(numeric_level_for_rank(rank), 2)

    return VocabularyLevel(
        cefr_level=cefr_for_numeric_level(numeric_level),
        numeric_level=numeric_level,
        known_words=int(known["word_id"].nunique()),
        tracked_words=tracked,
    )
