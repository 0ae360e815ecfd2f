from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from .....domain.interfaces.cache_interfaces import IPagedListCache, ListAndCount
from ... import ops
from ...redis_client import DEFAULT_STORE, StoreAlias
from ...serde import parse_count
from .key_factory import DEFAULT_SORT_BY, DEFAULT_SORT_ORDER, KeyFactory
from .sweeper import InvalidationSweeper, SweepReport

logger = logging.getLogger("DomainCache")


class DomainCache(BaseModel):
    """
    Base class shared by all domain cache repositories.

    Binds a store alias and a default TTL to the four primitives. Every
    helper inherits their contract: reads return None on any failure,
    writes and deletes return False, nothing raises.
    """

    redis_alias: StoreAlias = DEFAULT_STORE
    ttl_default: int | None = None  # None: no expiry

    model_config = {"arbitrary_types_allowed": True}

    # --------- Low-level helpers ----------------------------------------------
    async def _get(
        self,
        key: str,
        model: type[BaseModel] | None = None,
        *,
        alias: StoreAlias | None = None,
    ) -> Any | None:
        return await ops.get(key, store=alias or self.redis_alias, model=model)

    async def _set(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
        *,
        alias: StoreAlias | None = None,
    ) -> bool:
        return await ops.set(
            key, value, ttl if ttl is not None else self.ttl_default,
            store=alias or self.redis_alias,
        )

    async def _delete(self, key: str, *, alias: StoreAlias | None = None) -> bool:
        return await ops.delete(key, store=alias or self.redis_alias)

    async def _get_many(
        self,
        key: str,
        model: type[BaseModel],
        *,
        alias: StoreAlias | None = None,
    ) -> list[Any] | None:
        """Read a cached JSON array and validate every element into ``model``"""
        raw = await self._get(key, alias=alias)
        if raw is None:
            return None
        if not isinstance(raw, list):
            logger.warning(f"Cached value '{key}' is not a list; treating as miss")
            return None
        try:
            return [model.model_validate(item) for item in raw]
        except ValidationError as e:
            logger.warning(f"Cached value '{key}' does not match {model.__name__}: {e}")
            return None

    @staticmethod
    def _validate_into(model: type[BaseModel], entity: Any) -> BaseModel | None:
        """Validate a mapping or ORM object into ``model``; None if it does not fit."""
        if isinstance(entity, model):
            return entity
        try:
            if isinstance(entity, Mapping):
                return model.model_validate(entity)
            return model.model_validate(entity, from_attributes=True)
        except ValidationError as e:
            logger.warning(f"Cannot project {type(entity).__name__} into {model.__name__}: {e}")
            return None

    async def _get_count(self, key: str, *, strict: bool = False) -> int | None:
        """Read a count stored as a decimal string (see serde.parse_count)."""
        return parse_count(await self._get(key), strict=strict)

    async def _set_count(self, key: str, total: int, ttl: int | None = None) -> bool:
        return await self._set(key, str(total), ttl)


class PagedCache(DomainCache, IPagedListCache):
    """
    Paginated list + count cache over one domain prefix.

    List keys live under ``list_keys.prefix``, count keys under
    ``list_keys.count_prefix``. ``list_ttl`` applies when a setter is called
    without an explicit TTL.
    """

    list_keys: KeyFactory
    list_ttl: int | None = None

    def _ttl(self, ttl: int | None) -> int | None:
        return ttl if ttl is not None else self.list_ttl

    # ---- single halves ------------------------------------------------------
    async def get_list(
        self,
        page: int,
        limit: int,
        search: str | None,
        sort_by: str = DEFAULT_SORT_BY,
        sort_order: str = DEFAULT_SORT_ORDER,
    ) -> list[Any] | None:
        key = self.list_keys.page(page, limit, search, sort_by, sort_order)
        value = await self._get(key)
        if value is not None and not isinstance(value, list):
            logger.warning(f"Cached page '{key}' is not a list; treating as miss")
            return None
        return value

    async def get_count(
        self,
        search: str | None,
        sort_by: str = DEFAULT_SORT_BY,
        sort_order: str = DEFAULT_SORT_ORDER,
    ) -> int | None:
        """
        Cached total for a search/sort.

        Returns:
            None if not cached; 0 if cached but not a number; the count otherwise
        """
        return await self._get_count(self.list_keys.count(search, sort_by, sort_order))

    async def set_list(
        self,
        page: int,
        limit: int,
        search: str | None,
        sort_by: str,
        sort_order: str,
        items: list[Any],
        ttl: int | None = None,
    ) -> bool:
        key = self.list_keys.page(page, limit, search, sort_by, sort_order)
        return await self._set(key, items, self._ttl(ttl))

    async def set_count(
        self,
        search: str | None,
        sort_by: str,
        sort_order: str,
        total: int,
        ttl: int | None = None,
    ) -> bool:
        key = self.list_keys.count(search, sort_by, sort_order)
        return await self._set_count(key, total, self._ttl(ttl))

    # ---- combined -----------------------------------------------------------
    async def get_list_and_count(
        self,
        page: int,
        limit: int,
        search: str | None,
        sort_by: str = DEFAULT_SORT_BY,
        sort_order: str = DEFAULT_SORT_ORDER,
    ) -> ListAndCount:
        """Issue both reads concurrently; each half is None when not usable."""
        items, count = await asyncio.gather(
            self.get_list(page, limit, search, sort_by, sort_order),
            self._get_count(self.list_keys.count(search, sort_by, sort_order), strict=True),
        )
        return ListAndCount(items=items, count=count)

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
        *,
        concurrent: bool = True,
    ) -> bool:
        """Write page and total; concurrently unless ``concurrent`` is False."""
        list_write = self.set_list(page, limit, search, sort_by, sort_order, items, ttl)
        count_write = self.set_count(search, sort_by, sort_order, total, ttl)
        if concurrent:
            results = await asyncio.gather(list_write, count_write)
        else:
            results = [await list_write, await count_write]
        return all(results)

    async def remove_list_and_count(
        self,
        page: int,
        limit: int,
        search: str | None,
        sort_by: str = DEFAULT_SORT_BY,
        sort_order: str = DEFAULT_SORT_ORDER,
    ) -> bool:
        """Drop one page and the count of its search/sort."""
        results = await asyncio.gather(
            self._delete(self.list_keys.page(page, limit, search, sort_by, sort_order)),
            self._delete(self.list_keys.count(search, sort_by, sort_order)),
        )
        return all(results)

    async def clear_all_search_cache(self) -> SweepReport:
        """Sweep every page, then every count, of this domain."""
        return await InvalidationSweeper(self.list_keys, store=self.redis_alias).run()
