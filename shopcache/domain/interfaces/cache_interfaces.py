"""
Cache interfaces consumed by resolver/handler code.

- IPagedListCache: paginated list + count read-through cache with a sweep
- ISessionCache: single-subject projection keyed by an identifier

Callers follow the read-through pattern: ask the cache, query the relational
store on a miss, then populate the cache; invalidate after every mutation.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict


class ListAndCount(BaseModel):
    """
    Combined read of one page and its total.

    Either half may be None independently. ``count`` is None both when it was
    never cached and when the cached value is unusable; 0 means "cached as 0".
    """

    model_config = ConfigDict(frozen=True)

    items: list[Any] | None = None
    count: int | None = None

    @property
    def is_complete(self) -> bool:
        """True if both halves can be served without the source of truth."""
        return self.items is not None and self.count is not None


class IPagedListCache(ABC):
    """
    Interface for paginated list + count caches.

    Keys are derived from (page, limit, search, sort_by, sort_order); the
    search term is normalized so equivalent queries share an entry.
    """

    @abstractmethod
    async def get_list_and_count(
        self,
        page: int,
        limit: int,
        search: str | None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> ListAndCount:
        """
        Read the page and its total concurrently.

        Returns:
            ListAndCount with each half None when not cached
        """
        pass

    @abstractmethod
    async def set_list_and_count(
        self,
        page: int,
        limit: int,
        search: str | None,
        sort_by: str,
        sort_order: str,
        items: list[Any],
        total: int,
        ttl: int | None = None,
    ) -> bool:
        """
        Write the page and its total.

        Returns:
            True if both writes succeeded
        """
        pass

    @abstractmethod
    async def clear_all_search_cache(self) -> Any:
        """Drop every cached page and count of this domain (lists first)."""
        pass


class ISessionCache(ABC):
    """Interface for single-subject projection caches keyed by id."""

    @abstractmethod
    async def get_by_id(self, entity_id: str) -> BaseModel | None:
        pass

    @abstractmethod
    async def set_by_id(self, entity_id: str, entity: Any) -> bool:
        """Project ``entity`` and cache the projection."""
        pass

    @abstractmethod
    async def remove_by_id(self, entity_id: str) -> bool:
        pass
