"""
FastAPI lifespan hook for the cache.

Opens both stores at startup and closes them at shutdown. The cache is
best-effort: an unreachable Redis is logged and the app still starts.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..persistence.redis.redis_cache_factory import create_cache_factory
from ..persistence.redis.redis_manager import RedisManager
from .logging.logger import get_app_logger, setup_app_logging


@asynccontextmanager
async def cache_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Usage:
        app = FastAPI(lifespan=cache_lifespan)
        app.include_router(health_router)
    """
    setup_app_logging()
    logger = get_app_logger()

    logger.info("=== REDIS CACHE INITIALIZATION ===")
    await RedisManager.initialize()
    app.state.redis_manager = RedisManager
    app.state.caches = create_cache_factory()

    health_status = await RedisManager.get_health_status()
    logger.debug(f"Redis store health details: {health_status}")
    logger.info("===============================")

    try:
        yield
    finally:
        logger.info("=== REDIS CACHE SHUTDOWN ===")
        await RedisManager.cleanup()
        logger.info("✅ Redis shutdown completed")
