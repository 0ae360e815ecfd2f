"""
Pytest configuration and common fixtures for shopcache tests.

Every test runs against two in-memory fake stores installed into a fresh
RedisClient, so no Redis server is needed.
"""

import asyncio
import fnmatch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from shopcache.persistence.redis.redis_client import RedisClient
from shopcache.persistence.redis.redis_manager import RedisManager

TEST_OPERATION_TIMEOUT = 0.05
TEST_SCAN_TIMEOUT = 0.5


class FakeClock:
    """Manually advanced time source for TTL tests."""

    def __init__(self, now: float = 1_000.0):
        self.now = now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRedis:
    """
    Minimal in-memory stand-in for ``redis.asyncio.Redis``.

    Supports the commands the cache primitives issue: GET, SET (with EX),
    DEL, SCAN and PING. Set ``fail`` to make every command raise a
    connection error, or ``delay`` to make every command sleep.
    ``max_in_flight`` records how many commands were ever pending at once.
    """

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.data: dict[str, str] = {}
        self.expiry: dict[str, float] = {}
        self.fail = False
        self.delay = 0.0
        self.closed = False
        self.calls: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _enter(self, command: str, key: str) -> None:
        self.calls.append((command, key))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.fail:
                raise RedisConnectionError("Connection refused")
        finally:
            self.in_flight -= 1

    def _purge(self, key: str) -> None:
        deadline = self.expiry.get(key)
        if deadline is not None and deadline <= self.clock.now:
            self.data.pop(key, None)
            self.expiry.pop(key, None)

    async def get(self, key: str) -> str | None:
        await self._enter("GET", key)
        self._purge(key)
        return self.data.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        await self._enter("SET", key)
        self.data[key] = value
        if ex:
            self.expiry[key] = self.clock.now + ex
        else:
            self.expiry.pop(key, None)
        return True

    async def delete(self, *keys: str) -> int:
        await self._enter("DEL", ",".join(keys))
        removed = 0
        for key in keys:
            self._purge(key)
            if self.data.pop(key, None) is not None:
                removed += 1
            self.expiry.pop(key, None)
        return removed

    async def scan_iter(self, match: str = "*", count: int | None = None):
        await self._enter("SCAN", match)
        for key in list(self.data):
            self._purge(key)
        for key in list(self.data):
            if fnmatch.fnmatchcase(key, match):
                yield key

    async def ping(self) -> bool:
        await self._enter("PING", "")
        return True

    async def aclose(self) -> None:
        self.closed = True

    def ttl_of(self, key: str) -> float | None:
        """Seconds left before ``key`` expires, None without expiry."""
        deadline = self.expiry.get(key)
        return None if deadline is None else deadline - self.clock.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_store(clock) -> FakeRedis:
    return FakeRedis(clock)


@pytest.fixture
def app_store(clock) -> FakeRedis:
    return FakeRedis(clock)


@pytest.fixture(autouse=True)
def router(session_store, app_store):
    """Route both stores to the fakes for the duration of a test."""
    client = RedisClient(
        operation_timeout=TEST_OPERATION_TIMEOUT, scan_timeout=TEST_SCAN_TIMEOUT
    )
    client.install("session", session_store)
    client.install("app", app_store)
    RedisManager.use(client)
    yield client
    RedisManager._client = None
    RedisManager._initialized = False

