"""
Redis Module

Provides the store router, the cache primitives and lifecycle management.
"""

from . import ops, redis_handler
from .redis_cache_factory import RedisCacheFactory
from .redis_client import RedisClient
from .redis_manager import RedisManager

__all__ = ["RedisCacheFactory", "RedisClient", "RedisManager", "ops", "redis_handler"]
