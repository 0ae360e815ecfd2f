# shopcache/persistence/redis/redis_client.py

"""
Redis store router that is **fork-safe** and asyncio-native.

Two logical stores share one Redis server by default:

| Store   | Default DB | Purpose                                        |
|---------|------------|------------------------------------------------|
| session | 0          | short-lived identity/auth data (tokens, lockout) |
| app     | 1          | everything else (projections, pages, counts)   |

A key written under one store is never visible from the other.

Gunicorn / Uvicorn workers often `fork()` after import time; a connection
created in the parent is discarded the first time the child touches the
router, so every worker keeps its own pools.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, Literal, cast, get_args

from redis.asyncio import ConnectionPool, Redis

if TYPE_CHECKING:
    from ...core.config.settings import Settings

log = logging.getLogger("RedisClient")

StoreAlias = Literal["session", "app"]

STORE_ALIASES: tuple[StoreAlias, ...] = get_args(StoreAlias)
DEFAULT_STORE: StoreAlias = "app"

DEFAULT_DB_MAPPING: dict[StoreAlias, int] = {
    "session": 0,  # Login tokens, lockouts, attempt counters
    "app": 1,  # Entity projections, paginated lists and counts
}

_STORE_LABELS = {"session": "Session", "app": "App"}


def validate_store(alias: str) -> StoreAlias:
    """Return ``alias`` as a StoreAlias or raise ValueError for unknown tags."""
    if alias not in STORE_ALIASES:
        raise ValueError(
            f"Unknown store alias '{alias}'. Only {list(STORE_ALIASES)} are allowed."
        )
    return cast(StoreAlias, alias)


class RedisClient:
    """
    Fork-safe, asyncio-native router over the two cache stores.

    Holds one ``redis.asyncio.Redis`` handle per store. Handles are created
    lazily by :meth:`connect` and live until :meth:`close`. Tests swap a
    store for a fake with :meth:`install`.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        password: str | None = None,
        db_mapping: dict[StoreAlias, int] | None = None,
        *,
        max_connections: int = 64,
        connect_timeout: float = 5,
        operation_timeout: float = 2.0,
        scan_timeout: float = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self.password = password
        self.db_mapping: dict[StoreAlias, int] = {
            **DEFAULT_DB_MAPPING,
            **(db_mapping or {}),
        }
        self.max_connections = max_connections
        self.connect_timeout = connect_timeout
        self.operation_timeout = operation_timeout
        self.scan_timeout = scan_timeout

        self._pools: dict[StoreAlias, ConnectionPool] = {}
        self._clients: dict[StoreAlias, Any] = {}
        self._announced: set[StoreAlias] = set()
        self._pid: int | None = None

    @classmethod
    def from_settings(cls, cfg: Settings | None = None) -> RedisClient:
        """Build a router from environment settings (defaults to the global instance)."""
        if cfg is None:
            from ...core.config.settings import settings as cfg

        if cfg.shares_single_db:
            log.warning(
                f"Session and app stores both use db{cfg.redis_app_db}; "
                "keys of the two stores will share one key space"
            )

        return cls(
            host=cfg.redis_host,
            port=cfg.redis_port,
            password=cfg.redis_password,
            db_mapping={"session": cfg.redis_session_db, "app": cfg.redis_app_db},
            max_connections=cfg.redis_max_connections,
            connect_timeout=cfg.redis_connection_timeout,
            operation_timeout=cfg.redis_operation_timeout,
            scan_timeout=cfg.redis_scan_timeout,
        )

    # ---------- life-cycle --------------------------------------------------

    def _check_pid(self) -> None:
        pid = os.getpid()
        if self._pid is None:
            self._pid = pid
        elif self._pid != pid:
            # process forked – discard inherited handles
            log.debug(f"PID changed {self._pid} -> {pid}; dropping inherited stores")
            self._pools.clear()
            self._clients.clear()
            self._announced.clear()
            self._pid = pid

    def connect(self, alias: StoreAlias = DEFAULT_STORE) -> Redis:
        """
        Return the handle for ``alias``, creating it on first use.

        Idempotent: later calls return the same handle. Creating the handle
        performs no network I/O; the first command (or :meth:`verify`) does.
        """
        alias = validate_store(alias)
        self._check_pid()

        client = self._clients.get(alias)
        if client is not None:
            return client

        db = self.db_mapping[alias]
        log.info(
            f"Initialising {_STORE_LABELS[alias]} store in PID {self._pid} "
            f"({self.host}:{self.port}/{db})"
        )
        pool = ConnectionPool(
            host=self.host,
            port=self.port,
            password=self.password,
            db=db,
            decode_responses=True,
            encoding="utf-8",
            max_connections=self.max_connections,
            socket_connect_timeout=self.connect_timeout,
            socket_timeout=self.operation_timeout,
        )
        client = Redis(connection_pool=pool)
        self._pools[alias] = pool
        self._clients[alias] = client
        return client

    def connect_all(self) -> None:
        """Create handles for every store."""
        for alias in STORE_ALIASES:
            self.connect(alias)

    def install(self, alias: StoreAlias, client: Any) -> None:
        """Use ``client`` (anything with the redis.asyncio surface) for ``alias``."""
        alias = validate_store(alias)
        self._check_pid()
        self._pools.pop(alias, None)
        self._clients[alias] = client
        self._announced.discard(alias)

    def is_connected(self, alias: StoreAlias) -> bool:
        """True if a handle exists for ``alias`` in this process."""
        return self._pid == os.getpid() and alias in self._clients

    async def verify(self, alias: StoreAlias = DEFAULT_STORE) -> bool:
        """
        PING the store. Never raises.

        The first success per store is logged at INFO; every failure is
        logged at ERROR.
        """
        label = _STORE_LABELS.get(alias, alias)
        try:
            client = self.connect(alias)
            await asyncio.wait_for(client.ping(), timeout=self.operation_timeout)
        except Exception as exc:
            log.error(f"{label} Redis connection error: {exc}", exc_info=True)
            return False

        if alias not in self._announced:
            self._announced.add(alias)
            log.info(f"{label} Redis connected successfully.")
        return True

    async def close(self, alias: StoreAlias | None = None) -> None:
        """Close one or all store handles for this process."""
        pid = os.getpid()
        if self._pid != pid:
            log.debug("No Redis store to close for PID %s", pid)
            return

        aliases = [alias] if alias else list(self._clients.keys())
        for a in aliases:
            client = self._clients.pop(cast(StoreAlias, a), None)
            pool = self._pools.pop(cast(StoreAlias, a), None)
            self._announced.discard(cast(StoreAlias, a))
            if pool:
                log.info("Closing Redis store '%s' in PID %s", a, pid)
                await pool.disconnect()
            elif client is not None and hasattr(client, "aclose"):
                await client.aclose()
        if not self._clients:
            self._pid = None

    # ---------- access helpers ---------------------------------------------

    @asynccontextmanager
    async def connection(self, alias: StoreAlias = DEFAULT_STORE) -> AsyncIterator[Redis]:
        """
        Async context manager for a store handle.

        Usage::

            async with router.connection("session") as r:
                await r.set("key", "value")
        """
        # Pool handles connection lifecycle - no explicit cleanup needed
        yield self.connect(alias)
