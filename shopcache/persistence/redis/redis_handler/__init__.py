"""
Redis Handler Module

Repository classes for the domain caches. Each class owns a private key
prefix and composes the store primitives into read, write and invalidate
operations for one entity family.
"""

# Domain caches
from .address_book import RedisAddressBook
from .login import RedisLogin
from .password import RedisPasswordReset
from .permission import RedisPermissions
from .role import RedisRoles
from .tax_exemption import RedisTaxExemption
from .user import RedisUsers

# Utils
from .utils import DomainCache, InvalidationSweeper, KeyFactory, PagedCache

__all__ = [
    # Infrastructure
    "DomainCache",
    "InvalidationSweeper",
    "KeyFactory",
    "PagedCache",
    # Cache Repositories
    "RedisAddressBook",
    "RedisLogin",
    "RedisPasswordReset",
    "RedisPermissions",
    "RedisRoles",
    "RedisTaxExemption",
    "RedisUsers",
]
