"""
Service layer for the cached vocabulary level.

The level is derived from a scan of all of a user's items, so it is served
from an ExpiringCache. Writers that change a user's items go through
`record_review` / `track_new_item`, which invalidate the cached level.
"""

from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Any, Optional, Tuple

from vocab_scheduler import fsrs
from vocab_scheduler.analytics.constants import LEVEL_CACHE_NAMESPACE
from vocab_scheduler.analytics.metrics import build_item_snapshots_df, compute_vocabulary_level
from vocab_scheduler.analytics.types import ItemSource, VocabularyLevel
from vocab_scheduler.cache import MISS, ExpiringCache
from vocab_scheduler.config import get_cache_ttl_seconds
from vocab_scheduler.logging import get_logger


logger = get_logger(__name__)


def build_level_cache(ttl_seconds: Optional[int] = None, **kwargs) -> ExpiringCache:
    """
    Cache for vocabulary levels; TTL from LEVEL_CACHE_TTL_SECONDS unless given.
    """
    if ttl_seconds is None:
        ttl_seconds = get_cache_ttl_seconds()
    return ExpiringCache(namespace=LEVEL_CACHE_NAMESPACE, ttl_seconds=ttl_seconds, **kwargs)


def build_vocabulary_level(
    user_id: Any,
    source: ItemSource,
    now: datetime,
    r_target: float = fsrs.R_TARGET
) -> VocabularyLevel:
    """
    Compute a user's vocabulary level from scratch (scans every item).
    """
    items = list(source.list_items(user_id))
    ranks = source.frequency_ranks([item.word_id for item in items])
    snapshots_df = build_item_snapshots_df(items, ranks, now)
    level = compute_vocabulary_level(snapshots_df, r_target)

    logger.info(
        "vocabulary_level.computed",
        user_id=user_id,
        cefr_level=level.cefr_level,
        numeric_level=level.numeric_level,
        tracked_words=level.tracked_words,
    )
    return level


def get_user_vocabulary_level(
    user_id: Any,
    source: ItemSource,
    cache: ExpiringCache,
    now: Optional[datetime] = None
) -> VocabularyLevel:
    """
    Cached vocabulary level; computed and stored on a miss.
    """
    cached = cache.get(user_id)
    if cached is not MISS:
        return cached

    if now is None:
        now = datetime.now(timezone.utc)
    return cache.put(user_id, build_vocabulary_level(user_id, source, now))


def record_review(
    item: fsrs.Item,
    grade: Any,
    cache: ExpiringCache,
    now: Optional[datetime] = None,
    params: Optional[fsrs.FSRSParams] = None,
    rng: Optional[random.Random] = None
) -> Tuple[fsrs.Item, dict]:
    """
    Apply a review and drop the user's cached level.

    Returns:
        (updated_item, event_data) from fsrs.process_review
    """
    updated, event_data = fsrs.process_review(item, grade, now=now, params=params, rng=rng)
    cache.invalidate(item.user_id)
    return updated, event_data


def track_new_item(
    user_id: Any,
    word_id: Any,
    cache: ExpiringCache,
    now: Optional[datetime] = None
) -> fsrs.Item:
    """
    Start tracking a word for a user and drop their cached level.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    item = fsrs.Item.new(user_id=user_id, word_id=word_id, now=now)
    cache.invalidate(user_id)
    return item
