from __future__ import annotations

import logging
from typing import Any

from pydantic import Field

from ....domain.mappers import field, map_permissions, map_role_summaries
from ....domain.models.sessions import PermissionSession, RoleSummary
from ..redis_client import StoreAlias
from .utils.domain_cache import DomainCache
from .utils.key_factory import KeyFactory

logger = logging.getLogger("RedisPermissions")


class RedisPermissions(DomainCache):
    """
    Permission cache on the app store.

    - permissions:user:<userId>   -> list[PermissionSession] granted to a user
    - user:roles:info:<userId>    -> list[RoleSummary] of the user's roles
    - role_permissions:<roleId>   -> role/permission link rows, stored as given
    """

    redis_alias: StoreAlias = "app"
    user_keys: KeyFactory = Field(default_factory=lambda: KeyFactory(prefix="permissions:user:"))
    roles_info_keys: KeyFactory = Field(
        default_factory=lambda: KeyFactory(prefix="user:roles:info:")
    )
    role_keys: KeyFactory = Field(default_factory=lambda: KeyFactory(prefix="role_permissions:"))

    # ---- permissions granted to a user --------------------------------------
    async def get_user_permissions(self, user_id: str) -> list[PermissionSession] | None:
        return await self._get_many(self.user_keys.entity(user_id), PermissionSession)

    async def set_user_permissions(self, user_id: str, data: Any) -> bool:
        """
        Cache the permissions of a user.

        Args:
            user_id: Owner of the permissions
            data: Either a user carrying ``permissions`` or a single permission
                (anything with ``id`` and ``name``)

        Returns:
            True if stored; False if ``data`` has neither shape or the write failed
        """
        permissions = field(data, "permissions")
        if permissions is not None:
            sessions = map_permissions(permissions)
        elif field(data, "id") is not None and field(data, "name") is not None:
            sessions = map_permissions([data])
        else:
            logger.warning(f"Nothing to cache as permissions for user '{user_id}'")
            return False
        return await self._set(self.user_keys.entity(user_id), sessions)

    async def remove_user_permissions(self, user_id: str) -> bool:
        return await self._delete(self.user_keys.entity(user_id))

    # ---- roles held by a user -----------------------------------------------
    async def get_user_roles_info(self, user_id: str) -> list[RoleSummary] | None:
        return await self._get_many(self.roles_info_keys.entity(user_id), RoleSummary)

    async def set_user_roles_info(self, user_id: str, roles: list[Any]) -> bool:
        return await self._set(self.roles_info_keys.entity(user_id), map_role_summaries(roles))

    async def remove_user_roles_info(self, user_id: str) -> bool:
        return await self._delete(self.roles_info_keys.entity(user_id))

    # ---- permissions linked to a role ---------------------------------------
    async def get_role_permissions(self, role_id: str) -> list[Any] | None:
        value = await self._get(self.role_keys.entity(role_id))
        if value is not None and not isinstance(value, list):
            logger.warning(f"Role permissions of '{role_id}' are not a list; treating as miss")
            return None
        return value

    async def set_role_permissions(self, role_id: str, permissions: list[Any]) -> bool:
        return await self._set(self.role_keys.entity(role_id), permissions)

    async def remove_role_permissions(self, role_id: str) -> bool:
        return await self._delete(self.role_keys.entity(role_id))
