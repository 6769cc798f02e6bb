"""
Configuration loading.

Reads the scheduler parameter set and cache settings from the environment
(a .env file is loaded first if present). Values are read once at startup
and treated as immutable for the life of the process.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Mapping, Optional

from dotenv import load_dotenv

from vocab_scheduler.fsrs.constants import (
    DEFAULT_DESIRED_RETENTION,
    DEFAULT_ENABLE_FUZZING,
    DEFAULT_LEARNING_STEPS,
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_RELEARNING_STEPS,
    DEFAULT_WEIGHTS,
)
from vocab_scheduler.fsrs.params import FSRSParams


DEFAULT_CACHE_TTL_SECONDS = 600

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_float_list(name: str, raw: str) -> tuple[float, ...]:
    parts = [part.strip() for part in raw.split(",") if part.strip()]
    try:
        return tuple(float(part) for part in parts)
    except ValueError:
        raise ValueError(f"{name} must be a comma-separated list of numbers, got {raw!r}") from None


def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be true or false, got {raw!r}")


def load_fsrs_params(env: Optional[Mapping[str, str]] = None) -> FSRSParams:
    """
    Build the FSRS parameter set from environment variables.

    Unset variables fall back to the FSRS-4.5 defaults.

    Environment:
        FSRS_WEIGHTS: Comma-separated weights (at least 17)
        FSRS_DESIRED_RETENTION: Target retention, between 0 and 1
        FSRS_LEARNING_STEPS: Comma-separated minutes (may be empty)
        FSRS_RELEARNING_STEPS: Comma-separated minutes (may be empty)
        FSRS_MAXIMUM_INTERVAL: Longest interval in days
        FSRS_ENABLE_FUZZING: true/false

    Args:
        env: Mapping to read from (defaults to os.environ)

    Returns:
        Validated FSRSParams

    Raises:
        ValueError: If a variable is set but malformed
    """
    if env is None:
        env = os.environ

    weights = DEFAULT_WEIGHTS
    if env.get("FSRS_WEIGHTS"):
        weights = _parse_float_list("FSRS_WEIGHTS", env["FSRS_WEIGHTS"])

    desired_retention = DEFAULT_DESIRED_RETENTION
    if env.get("FSRS_DESIRED_RETENTION"):
        desired_retention = _parse_float("FSRS_DESIRED_RETENTION", env["FSRS_DESIRED_RETENTION"])

    # An explicitly empty step list is meaningful (no steps), so check for None
    learning_steps = DEFAULT_LEARNING_STEPS
    if env.get("FSRS_LEARNING_STEPS") is not None:
        learning_steps = _parse_float_list("FSRS_LEARNING_STEPS", env["FSRS_LEARNING_STEPS"])

    relearning_steps = DEFAULT_RELEARNING_STEPS
    if env.get("FSRS_RELEARNING_STEPS") is not None:
        relearning_steps = _parse_float_list("FSRS_RELEARNING_STEPS", env["FSRS_RELEARNING_STEPS"])

    maximum_interval = DEFAULT_MAXIMUM_INTERVAL
    if env.get("FSRS_MAXIMUM_INTERVAL"):
        maximum_interval = _parse_int("FSRS_MAXIMUM_INTERVAL", env["FSRS_MAXIMUM_INTERVAL"])

    enable_fuzzing = DEFAULT_ENABLE_FUZZING
    if env.get("FSRS_ENABLE_FUZZING"):
        enable_fuzzing = _parse_bool("FSRS_ENABLE_FUZZING", env["FSRS_ENABLE_FUZZING"])

    return FSRSParams(
        weights=weights,
        desired_retention=desired_retention,
        learning_steps=learning_steps,
        relearning_steps=relearning_steps,
        maximum_interval=maximum_interval,
        enable_fuzzing=enable_fuzzing,
    )


def get_cache_ttl_seconds(env: Optional[Mapping[str, str]] = None) -> int:
    """
    TTL for the vocabulary-level cache (LEVEL_CACHE_TTL_SECONDS, default 600).
    """
    if env is None:
        env = os.environ

    raw = env.get("LEVEL_CACHE_TTL_SECONDS")
    if not raw:
        return DEFAULT_CACHE_TTL_SECONDS

    ttl = _parse_int("LEVEL_CACHE_TTL_SECONDS", raw)
    if ttl < 1:
        raise ValueError(f"LEVEL_CACHE_TTL_SECONDS must be >= 1, got {ttl}")
    return ttl


@lru_cache(maxsize=1)
def get_fsrs_params() -> FSRSParams:
    """
    Process-wide parameter set, loaded from .env / environment on first use.
    """
    load_dotenv()
    return load_fsrs_params()
