"""
Persistence layer.

Usage:
    from shopcache.persistence import RedisCacheFactory, RedisManager

    await RedisManager.initialize()
    caches = RedisCacheFactory()
    page = await caches.roles.get_list_and_count(1, 10, "admin")
"""

from .redis import RedisCacheFactory, RedisClient, RedisManager

__all__ = ["RedisCacheFactory", "RedisClient", "RedisManager"]
