from __future__ import annotations

import time

from pydantic import Field

from ..redis_client import StoreAlias
from ..serde import parse_count
from .utils.domain_cache import DomainCache
from .utils.key_factory import KeyFactory

RESET_COOLDOWN_TTL = 60


class RedisPasswordReset(DomainCache):
    """Cooldown between password reset mails: ``reset-password-last-sent:<email>``."""

    redis_alias: StoreAlias = "app"
    keys: KeyFactory = Field(
        default_factory=lambda: KeyFactory(prefix="reset-password-last-sent:")
    )

    async def get_last_sent(self, email: str) -> int | None:
        """Epoch milliseconds of the last reset mail, or None when outside the cooldown."""
        return parse_count(await self._get(self.keys.entity(email)), strict=True)

    async def set_last_sent(
        self, email: str, sent_at_ms: int | None = None, ttl: int = RESET_COOLDOWN_TTL
    ) -> bool:
        sent_at_ms = int(time.time() * 1000) if sent_at_ms is None else sent_at_ms
        return await self._set(self.keys.entity(email), str(sent_at_ms), ttl)

    async def remove_last_sent(self, email: str) -> bool:
        return await self._delete(self.keys.entity(email))
