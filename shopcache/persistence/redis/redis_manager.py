"""
Redis Manager for shopcache application lifecycle management.

Owns the process-wide RedisClient (the store router) with an explicit
initialize/cleanup lifecycle. Operations that run before initialize() get a
lazily-built router from settings, so nothing blocks on startup ordering.
"""

import logging
from typing import Any

from .redis_client import STORE_ALIASES, RedisClient

logger = logging.getLogger(__name__)


class RedisManager:
    """
    Application-level holder of the store router.

    Handles lifecycle management and health reporting. A failed store never
    makes initialize() raise: the cache is best-effort and every primitive
    already degrades to a miss/no-op.
    """

    _client: RedisClient | None = None
    _initialized: bool = False

    @classmethod
    async def initialize(cls, client: RedisClient | None = None) -> None:
        """
        Open both stores once for this process.

        Args:
            client: Router to use (defaults to one built from settings)
        """
        if cls._initialized:
            logger.info("Redis stores already initialized - skipping")
            return

        router = client or cls._client or RedisClient.from_settings()
        cls._client = router

        logger.info(
            f"Setting up Redis stores on {router.host}:{router.port} "
            f"(max_connections: {router.max_connections})"
        )
        router.connect_all()

        healthy = []
        for alias in STORE_ALIASES:
            if await router.verify(alias):
                healthy.append(f"{alias}:db{router.db_mapping[alias]}")

        cls._initialized = True

        if len(healthy) == len(STORE_ALIASES):
            logger.info(f"✅ Redis stores ready: {', '.join(healthy)}")
        else:
            logger.warning(
                f"Redis stores initialized with {len(healthy)}/{len(STORE_ALIASES)} "
                "reachable; unreachable stores behave as an empty cache"
            )

    @classmethod
    def use(cls, client: RedisClient) -> None:
        """Replace the active router (test injection, custom wiring)."""
        cls._client = client
        cls._initialized = True

    @classmethod
    def get_client(cls) -> RedisClient:
        """Return the active router, building one from settings on first use."""
        if cls._client is None:
            logger.debug("RedisManager used before initialize(); building router lazily")
            cls._client = RedisClient.from_settings()
        return cls._client

    @classmethod
    async def get_health_status(cls) -> dict[str, Any]:
        """
        Get health status of both stores.

        Returns:
            Dictionary containing initialization status and per-store health info
        """
        health_status: dict[str, Any] = {"initialized": cls._initialized, "stores": {}}

        if not cls._initialized or cls._client is None:
            health_status["message"] = "Redis not initialized"
            return health_status

        router = cls._client
        for alias in STORE_ALIASES:
            ok = await router.verify(alias)
            health_status["stores"][alias] = {
                "status": "healthy" if ok else "unhealthy",
                "database": router.db_mapping[alias],
            }

        return health_status

    @classmethod
    async def cleanup(cls) -> None:
        """
        Clean shutdown of both stores.

        Should be called during application shutdown.
        """
        if cls._client is None:
            logger.info("Redis stores not initialized, skipping cleanup")
            cls._initialized = False
            return

        try:
            logger.info("Shutting down Redis stores...")
            await cls._client.close()
            logger.info("Redis stores shut down successfully")
        except Exception as e:
            logger.error(f"Error during Redis cleanup: {e}", exc_info=True)
        finally:
            cls._client = None
            cls._initialized = False

    @classmethod
    def is_initialized(cls) -> bool:
        """Check if Redis stores are initialized."""
        return cls._initialized

    @classmethod
    def get_store_info(cls) -> dict[str, int]:
        """
        Get information about the configured stores.

        Returns:
            Dictionary mapping store aliases to database numbers
        """
        return dict(cls.get_client().db_mapping)
