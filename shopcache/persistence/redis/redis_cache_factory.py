"""
Redis cache factory for shopcache.

Builds the domain caches once and hands them out by entity family, so
handler code depends on one object instead of importing every repository.
"""

from functools import cached_property

from .redis_handler import (
    RedisAddressBook,
    RedisLogin,
    RedisPasswordReset,
    RedisPermissions,
    RedisRoles,
    RedisTaxExemption,
    RedisUsers,
)


class RedisCacheFactory:
    """
    Access point for every domain cache.

    Store assignment:
    - session store: login throttling, login lookups by email, token sessions
    - app store: everything else

    Instances are stateless apart from their key prefixes, so one factory can
    be shared across requests.
    """

    @cached_property
    def users(self) -> RedisUsers:
        return RedisUsers()

    @cached_property
    def roles(self) -> RedisRoles:
        return RedisRoles()

    @cached_property
    def permissions(self) -> RedisPermissions:
        return RedisPermissions()

    @cached_property
    def address_book(self) -> RedisAddressBook:
        return RedisAddressBook()

    @cached_property
    def tax_exemption(self) -> RedisTaxExemption:
        return RedisTaxExemption()

    @cached_property
    def login(self) -> RedisLogin:
        return RedisLogin()

    @cached_property
    def password_reset(self) -> RedisPasswordReset:
        return RedisPasswordReset()


def create_cache_factory() -> RedisCacheFactory:
    """Create a factory over the process-wide store router."""
    return RedisCacheFactory()
