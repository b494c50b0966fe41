from datetime import datetime, timedelta, timezone

import pytest

from services.memory_backend import InMemoryBackend
from services.token_store import TokenStore

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_backend():
    return InMemoryBackend()


@pytest.fixture
def store(memory_backend, clock):
    return TokenStore(memory_backend, ttl=timedelta(seconds=600), clock=clock)


@pytest.fixture(autouse=True)
def clear_supabase_env(monkeypatch):
    """Keep tests independent of the developer's shell environment."""
    for var in (
        "SUPABASE_URL",
        "SUPABASE_ANON_KEY",
        "SUPABASE_TABLE",
        "TOKEN_TTL_SECONDS",
        "TOKEN_STORE_REQUIRE_DURABLE",
        "TOKEN_SWEEP_ENABLED",
    ):
        monkeypatch.delenv(var, raising=False)
