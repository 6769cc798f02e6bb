from datetime import datetime, timezone

import pytest

from vocab_scheduler import fsrs
from vocab_scheduler.cache import CacheTable, ExpiringCache
from vocab_scheduler.logging import configure_logging


class FakeClock:
    """Manually advanced clock returning seconds."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    configure_logging(level="WARNING")


@pytest.fixture
def now():
    return datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def params():
    # Fuzzing off so intervals are deterministic
    return fsrs.FSRSParams(enable_fuzzing=False)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_table():
    return CacheTable()


@pytest.fixture
def cache(clock, cache_table):
    return ExpiringCache(namespace="test", ttl_seconds=600, clock=clock, table=cache_table)
