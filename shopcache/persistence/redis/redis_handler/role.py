from __future__ import annotations

import logging
from typing import Any

from pydantic import Field

from ....domain.interfaces.cache_interfaces import ISessionCache
from ....domain.mappers import map_role_to_response
from ....domain.models.sessions import RoleSession
from ..redis_client import StoreAlias
from .utils.domain_cache import PagedCache
from .utils.key_factory import KeyFactory, normalize_term

logger = logging.getLogger("RedisRoles")

ROLE_EXISTS_FLAG = "exists"


def _role_name(role_name: str) -> str:
    return normalize_term(role_name)


class RedisRoles(PagedCache, ISessionCache):
    """
    Role cache on the app store.

    - role:<id> / role:<normalized name>    -> RoleSession projection
    - role-exists:<normalized name>         -> "exists" flag
    - role-user-count:<id>                  -> users holding the role
    - roles:page:...  / roles-count:search:...  -> role listing pages and totals

    Example usage:
        roles = RedisRoles()
        cached = await roles.get_list_and_count(1, 10, "admin")
        if not cached.is_complete:
            rows, total = ...  # query the database
            await roles.set_list_and_count(1, 10, "admin", "createdAt", "desc", rows, total)
    """

    redis_alias: StoreAlias = "app"
    keys: KeyFactory = Field(default_factory=lambda: KeyFactory(prefix="role:"))
    exists_keys: KeyFactory = Field(default_factory=lambda: KeyFactory(prefix="role-exists:"))
    user_count_keys: KeyFactory = Field(
        default_factory=lambda: KeyFactory(prefix="role-user-count:")
    )
    list_keys: KeyFactory = Field(
        default_factory=lambda: KeyFactory(prefix="roles:", count_prefix="roles-count:")
    )

    # ---- role projection ----------------------------------------------------
    async def get_by_id(self, entity_id: str) -> RoleSession | None:
        return await self._get(self.keys.entity(entity_id), RoleSession)

    async def get_by_name(self, role_name: str) -> RoleSession | None:
        return await self._get(self.keys.entity(_role_name(role_name)), RoleSession)

    async def set_by_id(self, entity_id: str, entity: Any) -> bool:
        """Project a role row and cache it under its id"""
        return await self._set(self.keys.entity(entity_id), self._project(entity))

    async def set_by_name(self, role_name: str, entity: Any) -> bool:
        """Project a role row and cache it under its normalized name"""
        return await self._set(self.keys.entity(_role_name(role_name)), self._project(entity))

    async def remove_by_id(self, entity_id: str) -> bool:
        return await self._delete(self.keys.entity(entity_id))

    async def remove_by_name(self, role_name: str) -> bool:
        return await self._delete(self.keys.entity(_role_name(role_name)))

    @staticmethod
    def _project(entity: Any) -> RoleSession:
        return entity if isinstance(entity, RoleSession) else map_role_to_response(entity)

    # ---- name existence flag ------------------------------------------------
    async def name_exists(self, role_name: str) -> bool:
        """True only if the flag was cached; a miss means "unknown", not "free"."""
        flag = await self._get(self.exists_keys.entity(_role_name(role_name)))
        return flag == ROLE_EXISTS_FLAG

    async def set_name_exists(self, role_name: str) -> bool:
        return await self._set(self.exists_keys.entity(_role_name(role_name)), ROLE_EXISTS_FLAG)

    async def remove_name_exists(self, role_name: str) -> bool:
        return await self._delete(self.exists_keys.entity(_role_name(role_name)))

    # ---- users per role -----------------------------------------------------
    async def get_user_count(self, role_id: str) -> int:
        """Users holding the role; 0 when not cached or unreadable."""
        return await self._get_count(self.user_count_keys.entity(role_id)) or 0

    async def set_user_count(self, role_id: str, count: int) -> bool:
        return await self._set_count(self.user_count_keys.entity(role_id), count)

    async def remove_user_count(self, role_id: str) -> bool:
        return await self._delete(self.user_count_keys.entity(role_id))
