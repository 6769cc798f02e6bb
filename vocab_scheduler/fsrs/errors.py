"""
Errors raised by the scheduler.
"""

from __future__ import annotations

from typing import Any


class InvalidGradeError(ValueError):
    """Grade outside the recognized AGAIN/HARD/GOOD/EASY set."""

    def __init__(self, grade: Any):
        self.grade = grade
        super().__init__(f"Invalid review grade: {grade!r} (expected 1-4 or again/hard/good/easy)")


class MalformedItemError(ValueError):
    """Item state that cannot be scheduled (e.g. missing identity fields)."""
