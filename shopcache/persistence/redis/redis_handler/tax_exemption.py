from __future__ import annotations

from typing import Any

from pydantic import Field

from ....domain.models.sessions import TaxExemptionSession
from ..redis_client import StoreAlias
from .utils.domain_cache import DomainCache
from .utils.key_factory import KeyFactory


class RedisTaxExemption(DomainCache):
    """Tax exemption of a user: ``tax-exemption:user:<userId>`` on the app store."""

    redis_alias: StoreAlias = "app"
    keys: KeyFactory = Field(default_factory=lambda: KeyFactory(prefix="tax-exemption:user:"))

    async def get_by_user_id(self, user_id: str) -> TaxExemptionSession | None:
        return await self._get(self.keys.entity(user_id), TaxExemptionSession)

    async def set_by_user_id(self, user_id: str, data: Any) -> bool:
        record = self._validate_into(TaxExemptionSession, data)
        if record is None:
            return False
        return await self._set(self.keys.entity(user_id), record)

    async def remove_by_user_id(self, user_id: str) -> bool:
        return await self._delete(self.keys.entity(user_id))
