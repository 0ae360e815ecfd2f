"""
shopcache - Redis cache and session layer for the e-commerce services

Read-through caching for paginated list queries, per-entity session
projections and authentication throttling, partitioned across a short-lived
session store and a longer-lived app store.

Usage:
    from shopcache import RedisCacheFactory, RedisManager

    await RedisManager.initialize()
    caches = RedisCacheFactory()
    cached = await caches.users.get_list_and_count(1, 20, "alice")
"""

from .core.config.settings import settings
from .persistence.redis import RedisCacheFactory, RedisClient, RedisManager, ops

# Dynamic version from pyproject.toml
__version__ = settings.version

__all__ = ["RedisCacheFactory", "RedisClient", "RedisManager", "ops", "settings"]
