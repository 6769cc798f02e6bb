"""
Types for vocabulary-level analytics.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Protocol

from vocab_scheduler.fsrs import Item


@dataclass(frozen=True)
class VocabularyLevel:
    """
    Aggregate vocabulary level for one user.
    """
    cefr_level: str
    numeric_level: float
    known_words: int
    tracked_words: int


class ItemSource(Protocol):
    """
    Storage collaborator that supplies a user's study items.
    """

    def list_items(self, user_id: Any) -> Iterable[Item]:
        ...

    def frequency_ranks(self, word_ids: Iterable[Any]) -> Mapping[Any, Optional[int]]:
        ...
