from __future__ import annotations

import logging
from typing import Any

from pydantic import Field

from ....domain.interfaces.cache_interfaces import ISessionCache
from ....domain.mappers import (
    map_user_to_response_by_email,
    map_user_to_response_by_id,
    map_user_to_token_data,
)
from ....domain.models.sessions import UserSession, UserSessionByEmail, UserSessionById
from ..redis_client import StoreAlias
from .utils.domain_cache import PagedCache
from .utils.key_factory import KeyFactory

logger = logging.getLogger("RedisUsers")

USERS_LIST_TTL = 60


class RedisUsers(PagedCache, ISessionCache):
    """
    User cache spanning both stores.

    app store:
    - session:user:<id>        -> UserSessionById projection
    - email:<email>            -> email registration marker
    - count:user               -> total users in the database
    - username:<username>      -> username marker (removal only)
    - users:page:... / users:count:search:...  -> user listing pages and totals

    session store:
    - session:email:<email>    -> UserSessionByEmail (login lookup, carries password hash)
    - session:token:<sid>      -> UserSession for an issued token, always with a TTL
    """

    redis_alias: StoreAlias = "app"
    session_alias: StoreAlias = "session"
    list_ttl: int | None = USERS_LIST_TTL

    keys: KeyFactory = Field(default_factory=lambda: KeyFactory(prefix="session:"))
    email_keys: KeyFactory = Field(default_factory=lambda: KeyFactory(prefix="email:"))
    count_keys: KeyFactory = Field(default_factory=lambda: KeyFactory(prefix="count:"))
    username_keys: KeyFactory = Field(default_factory=lambda: KeyFactory(prefix="username:"))
    list_keys: KeyFactory = Field(default_factory=lambda: KeyFactory(prefix="users:"))

    # ---- profile by id (app store) ------------------------------------------
    async def get_by_id(self, entity_id: str) -> UserSessionById | None:
        return await self._get(self.keys.entity("user:", entity_id), UserSessionById)

    async def set_by_id(self, entity_id: str, entity: Any) -> bool:
        """Project a user row (without password) and cache it under its id"""
        # a by-email projection would carry the password hash; re-project it
        data = (
            entity
            if type(entity) is UserSessionById
            else map_user_to_response_by_id(entity)
        )
        return await self._set(self.keys.entity("user:", entity_id), data)

    async def remove_by_id(self, entity_id: str) -> bool:
        return await self._delete(self.keys.entity("user:", entity_id))

    # ---- login lookup by email (session store) ------------------------------
    async def get_by_email(self, email: str) -> UserSessionByEmail | None:
        return await self._get(
            self.keys.entity("email:", email), UserSessionByEmail, alias=self.session_alias
        )

    async def set_by_email(self, email: str, entity: Any) -> bool:
        data = (
            entity
            if isinstance(entity, UserSessionByEmail)
            else map_user_to_response_by_email(entity)
        )
        return await self._set(self.keys.entity("email:", email), data, alias=self.session_alias)

    async def remove_by_email(self, email: str) -> bool:
        return await self._delete(self.keys.entity("email:", email), alias=self.session_alias)

    # ---- token sessions (session store) -------------------------------------
    async def get_token_session(self, session_id: str) -> UserSession | None:
        return await self._get(
            self.keys.entity("token:", session_id), UserSession, alias=self.session_alias
        )

    async def set_token_session(self, session_id: str, data: Any, ttl: int) -> bool:
        """
        Cache the identity behind an access token.

        Args:
            session_id: Login session id embedded in the token
            data: User/session record carrying ``session_id`` and role names
            ttl: Seconds until the token expires; required so sessions never outlive it
        """
        if not ttl or ttl <= 0:
            logger.warning(f"Refusing to cache token session '{session_id}' without a TTL")
            return False
        payload = data if isinstance(data, UserSession) else map_user_to_token_data(data)
        return await self._set(
            self.keys.entity("token:", session_id), payload, ttl, alias=self.session_alias
        )

    async def remove_token_session(self, session_id: str) -> bool:
        return await self._delete(self.keys.entity("token:", session_id), alias=self.session_alias)

    # ---- email / username markers (app store) -------------------------------
    async def get_email(self, email: str) -> str | None:
        return await self._get(self.email_keys.entity(email))

    async def set_email(self, email: str, data: str) -> bool:
        return await self._set(self.email_keys.entity(email), data)

    async def remove_email(self, email: str) -> bool:
        return await self._delete(self.email_keys.entity(email))

    async def remove_username(self, username: str) -> bool:
        return await self._delete(self.username_keys.entity(username))

    # ---- total users in the database ----------------------------------------
    async def get_total_count(self) -> int | None:
        """None when not cached."""
        return await self._get_count(self.count_keys.entity("user"))

    async def set_total_count(self, count: int) -> bool:
        return await self._set_count(self.count_keys.entity("user"), count)

    async def remove_total_count(self) -> bool:
        return await self._delete(self.count_keys.entity("user"))
