from __future__ import annotations

import logging
from typing import Any

from pydantic import Field

from ....domain.models.sessions import AddressBookSession
from ..redis_client import StoreAlias
from .utils.domain_cache import DomainCache
from .utils.key_factory import KeyFactory

logger = logging.getLogger("RedisAddressBook")


class RedisAddressBook(DomainCache):
    """
    Address book cache on the app store.

    - address-book:type:<type>user:<userId>        -> entries of one address type
    - address-book:address-id:<id>user:<userId>    -> one entry
    - address-book:user:<userId>                   -> every entry of the user
    """

    redis_alias: StoreAlias = "app"
    keys: KeyFactory = Field(default_factory=lambda: KeyFactory(prefix="address-book:"))

    def _type_key(self, address_type: str, user_id: str) -> str:
        return self.keys.entity("type:", address_type, "user:", user_id)

    def _entry_key(self, address_id: str, user_id: str) -> str:
        return self.keys.entity("address-id:", address_id, "user:", user_id)

    def _user_key(self, user_id: str) -> str:
        return self.keys.entity("user:", user_id)

    def _entries(self, entries: list[Any]) -> list[AddressBookSession] | None:
        projected = [self._validate_into(AddressBookSession, e) for e in entries]
        if any(p is None for p in projected):
            return None
        return projected

    async def _set_entries(self, key: str, entries: list[Any]) -> bool:
        projected = self._entries(entries)
        if projected is None:
            logger.warning(f"Skipping cache write for '{key}': unprojectable entry")
            return False
        return await self._set(key, projected)

    # ---- by type --------------------------------------------------------------
    async def get_by_type(self, address_type: str, user_id: str) -> list[AddressBookSession] | None:
        return await self._get_many(self._type_key(address_type, user_id), AddressBookSession)

    async def set_by_type(self, address_type: str, user_id: str, entries: list[Any]) -> bool:
        return await self._set_entries(self._type_key(address_type, user_id), entries)

    async def remove_by_type(self, address_type: str, user_id: str) -> bool:
        return await self._delete(self._type_key(address_type, user_id))

    # ---- single entry ---------------------------------------------------------
    async def get_by_id(self, address_id: str, user_id: str) -> AddressBookSession | None:
        return await self._get(self._entry_key(address_id, user_id), AddressBookSession)

    async def set_by_id(self, address_id: str, user_id: str, entry: Any) -> bool:
        projected = self._validate_into(AddressBookSession, entry)
        if projected is None:
            return False
        return await self._set(self._entry_key(address_id, user_id), projected)

    async def remove_by_id(self, address_id: str, user_id: str) -> bool:
        return await self._delete(self._entry_key(address_id, user_id))

    # ---- every entry of a user ------------------------------------------------
    async def get_all(self, user_id: str) -> list[AddressBookSession] | None:
        return await self._get_many(self._user_key(user_id), AddressBookSession)

    async def set_all(self, user_id: str, entries: list[Any]) -> bool:
        return await self._set_entries(self._user_key(user_id), entries)

    async def remove_all(self, user_id: str) -> bool:
        return await self._delete(self._user_key(user_id))
