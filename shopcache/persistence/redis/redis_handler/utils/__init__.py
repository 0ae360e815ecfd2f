"""
Redis Handler Utils

Key building, the domain cache base classes and the invalidation sweeper.
"""

from .domain_cache import DomainCache, PagedCache
from .key_factory import CacheKey, KeyFactory, KeyKind, normalize_search, normalize_term
from .sweeper import InvalidationSweeper, SweepPlan, SweepReport

__all__ = [
    "CacheKey",
    "DomainCache",
    "InvalidationSweeper",
    "KeyFactory",
    "KeyKind",
    "PagedCache",
    "SweepPlan",
    "SweepReport",
    "normalize_search",
    "normalize_term",
]
