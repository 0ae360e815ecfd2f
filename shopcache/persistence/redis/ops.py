# shopcache/persistence/redis/ops.py

"""
The four store-scoped cache primitives: get, set, delete, list_keys.

Every domain cache is built from these. Each primitive runs its Redis command
through ``_execute``, which bounds it with the router's operation timeout (the
scan timeout for SCAN) and returns a CacheResult instead of raising. The public
functions then log any error and return the documented soft default (None,
False, []), so callers can be written as if the cache were always available.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from redis.asyncio import Redis

from .errors import CacheConnectionError, CacheDecodeError, CacheError, CacheTimeoutError
from .redis_client import DEFAULT_STORE, StoreAlias, validate_store
from .redis_manager import RedisManager
from .serde import dumps, loads

logger = logging.getLogger("RedisCoreMethods")

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class CacheResult(Generic[T]):
    """Outcome of one primitive: either ``value`` or ``error`` is meaningful."""

    value: T | None = None
    error: CacheError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or(self, default: T) -> T:
        """Return the value, or ``default`` if the primitive failed."""
        return default if self.error is not None else self.value  # type: ignore[return-value]


async def _execute(
    command: str,
    key: str,
    store: StoreAlias,
    call: Callable[[Redis], Awaitable[T]],
    *,
    timeout: float | None = None,
) -> CacheResult[T]:
    """Run ``call`` against the store's handle, bounded by ``timeout`` (default: the operation timeout)."""
    router = RedisManager.get_client()
    timeout = timeout if timeout is not None else router.operation_timeout
    try:
        async with router.connection(store) as redis:
            value = await asyncio.wait_for(call(redis), timeout=timeout)
        return CacheResult(value=value)
    except TimeoutError:
        return CacheResult(
            error=CacheTimeoutError(
                f"Redis {command} timed out after {timeout}s",
                key=key,
                store=store,
            )
        )
    except Exception as e:
        err = CacheConnectionError(f"Redis {command} failed: {e}", key=key, store=store)
        err.__cause__ = e
        return CacheResult(error=err)


def _soft(result: CacheResult[T], default: T, command: str) -> T:
    """Log a failed result and substitute ``default``."""
    if result.error is None:
        return result.value  # type: ignore[return-value]
    err = result.error
    if isinstance(err, CacheDecodeError):
        logger.warning(f"{err} (store '{err.store}', key '{err.key}'); treating as miss")
    else:
        logger.error(
            f"Redis {command} error for key '{err.key}' on store '{err.store}': {err}",
            exc_info=err.__cause__ or err,
        )
    return default


# =========================================================================
# SECTION: Result-returning primitives
# =========================================================================
async def fetch(
    key: str, *, store: StoreAlias = DEFAULT_STORE, model: type[BaseModel] | None = None
) -> CacheResult[Any]:
    """GET + JSON decode. A missing key is a successful result with value None."""
    store = validate_store(store)
    result = await _execute("GET", key, store, lambda r: r.get(key))
    if not result.ok:
        return result
    try:
        return CacheResult(value=loads(result.value, model=model))
    except CacheDecodeError as e:
        e.key, e.store = key, store
        return CacheResult(error=e)


async def store_value(
    key: str, value: Any, ttl: int | None = None, *, store: StoreAlias = DEFAULT_STORE
) -> CacheResult[bool]:
    """JSON encode + SET, with EX when ``ttl`` is truthy."""
    store = validate_store(store)
    try:
        payload = dumps(value)
    except (TypeError, ValueError) as e:
        err = CacheError(f"Value for key '{key}' is not JSON serializable: {e}", key=key, store=store)
        return CacheResult(error=err)
    if ttl:
        return await _execute("SET", key, store, lambda r: r.set(key, payload, ex=ttl))
    return await _execute("SET", key, store, lambda r: r.set(key, payload))


async def remove(key: str, *, store: StoreAlias = DEFAULT_STORE) -> CacheResult[int]:
    """DEL; returns the number of keys removed (0 for a missing key)."""
    store = validate_store(store)
    return await _execute("DEL", key, store, lambda r: r.delete(key))


async def scan(pattern: str = "*", *, store: StoreAlias = DEFAULT_STORE) -> CacheResult[list[str]]:
    """
    SCAN the whole store for keys matching the glob ``pattern``.

    A full-keyspace walk takes many round trips, so it is bounded by the
    router's scan timeout rather than the per-command operation timeout.
    """
    store = validate_store(store)

    async def _collect(redis: Redis) -> list[str]:
        return [k async for k in redis.scan_iter(match=pattern, count=500)]

    return await _execute(
        "SCAN", pattern, store, _collect, timeout=RedisManager.get_client().scan_timeout
    )


# =========================================================================
# SECTION: Public soft-failure primitives
# =========================================================================
async def get(
    key: str, *, store: StoreAlias = DEFAULT_STORE, model: type[BaseModel] | None = None
) -> Any | None:
    """
    Retrieve and decode the value of a key.

    Args:
        key: The full Redis key.
        store: Store to read from (default: "app").
        model: Optional BaseModel class to validate the payload into.

    Returns:
        The decoded value, or None on miss, malformed value, or any store error.
    """
    result = await fetch(key, store=store, model=model)
    value = _soft(result, None, "GET")
    logger.debug(f"Cache {'HIT' if value is not None else 'MISS'}: {store}/{key}")
    return value


async def set(
    key: str, value: Any, ttl: int | None = None, *, store: StoreAlias = DEFAULT_STORE
) -> bool:
    """
    Encode and store a value, with optional expiration.

    Args:
        key: The full Redis key.
        value: JSON-compatible payload or pydantic model.
        ttl: Optional expiration time in seconds; falsy means no expiry.
        store: Store to write to (default: "app").

    Returns:
        True if the write succeeded, False otherwise (never raises).
    """
    return bool(_soft(await store_value(key, value, ttl, store=store), False, "SET"))


async def delete(key: str, *, store: StoreAlias = DEFAULT_STORE) -> bool:
    """
    Delete a key. Deleting a missing key is a successful no-op.

    Returns:
        True if the command reached the store, False on error.
    """
    result = await remove(key, store=store)
    return _soft(result, None, "DEL") is not None


async def list_keys(pattern: str = "*", *, store: StoreAlias = DEFAULT_STORE) -> list[str]:
    """
    Return all keys of a store matching a glob pattern.

    Returns:
        Matching keys, or [] on any error.
    """
    return _soft(await scan(pattern, store=store), [], "SCAN")
