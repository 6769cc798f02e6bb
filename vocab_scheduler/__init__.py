"""
vocab-scheduler: FSRS review scheduling for vocabulary study, plus an
expiring cache for per-user aggregates such as the vocabulary level.
"""

__version__ = "0.1.0"
