"""
Tests for the domain cache factory.
"""

from shopcache.persistence.redis.redis_cache_factory import RedisCacheFactory, create_cache_factory
from shopcache.persistence.redis.redis_handler import (
    RedisAddressBook,
    RedisLogin,
    RedisPasswordReset,
    RedisPermissions,
    RedisRoles,
    RedisTaxExemption,
    RedisUsers,
)


class TestRedisCacheFactory:
    def test_builds_every_domain_cache(self):
        caches = create_cache_factory()

        assert isinstance(caches.users, RedisUsers)
        assert isinstance(caches.roles, RedisRoles)
        assert isinstance(caches.permissions, RedisPermissions)
        assert isinstance(caches.address_book, RedisAddressBook)
        assert isinstance(caches.tax_exemption, RedisTaxExemption)
        assert isinstance(caches.login, RedisLogin)
        assert isinstance(caches.password_reset, RedisPasswordReset)

    def test_instances_are_reused(self):
        caches = RedisCacheFactory()
        assert caches.roles is caches.roles

    def test_store_assignment(self):
        caches = RedisCacheFactory()
        assert caches.login.redis_alias == "session"
        assert caches.users.session_alias == "session"
        assert caches.roles.redis_alias == "app"
        assert caches.password_reset.redis_alias == "app"
