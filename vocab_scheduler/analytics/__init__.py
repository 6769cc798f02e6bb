"""
Analytics package exports.
"""

from vocab_scheduler.analytics.service import (
    build_level_cache,
    build_vocabulary_level,
    get_user_vocabulary_level,
    record_review,
    track_new_item,
)
from vocab_scheduler.analytics.types import ItemSource, VocabularyLevel

__all__ = [
    "build_level_cache",
    "build_vocabulary_level",
    "get_user_vocabulary_level",
    "record_review",
    "track_new_item",
    "ItemSource",
    "VocabularyLevel",
]
