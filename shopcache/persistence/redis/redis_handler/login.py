from __future__ import annotations

import logging
import math
import time

from pydantic import Field

from ....domain.models.sessions import LockoutSession, LoginAttempts
from ..redis_client import StoreAlias
from .utils.domain_cache import DomainCache
from .utils.key_factory import KeyFactory, normalize_term

logger = logging.getLogger("RedisLogin")

LOCKOUT_TTL = 300
ATTEMPTS_TTL = 3600
MAX_LOGIN_ATTEMPTS = 5
LOCKOUT_SECONDS = 900


def _email(email: str) -> str:
    return normalize_term(email)


def _now_ms() -> int:
    return int(time.time() * 1000)


class RedisLogin(DomainCache):
    """
    Authentication throttling on the session store.

    - account-lockout:<email>   -> {lockedAt, duration}, default TTL 300s
    - login-attempts:<email>    -> {attempts}, default TTL 3600s

    Emails are lower-cased and trimmed before they become part of a key.
    """

    redis_alias: StoreAlias = "session"
    lockout_keys: KeyFactory = Field(default_factory=lambda: KeyFactory(prefix="account-lockout:"))
    attempt_keys: KeyFactory = Field(default_factory=lambda: KeyFactory(prefix="login-attempts:"))

    # ---- lockout record -----------------------------------------------------
    async def get_lockout(self, email: str) -> LockoutSession | None:
        return await self._get(self.lockout_keys.entity(_email(email)), LockoutSession)

    async def set_lockout(
        self, email: str, session: LockoutSession, ttl: int = LOCKOUT_TTL
    ) -> bool:
        return await self._set(self.lockout_keys.entity(_email(email)), session, ttl)

    async def remove_lockout(self, email: str) -> bool:
        return await self._delete(self.lockout_keys.entity(_email(email)))

    async def lockout_remaining(self, email: str, now_ms: int | None = None) -> int:
        """Seconds until the lockout of ``email`` ends; 0 when not locked."""
        lockout = await self.get_lockout(email)
        if lockout is None:
            return 0
        now_ms = _now_ms() if now_ms is None else now_ms
        ends_at = lockout.locked_at + lockout.duration * 1000
        return max(0, math.ceil((ends_at - now_ms) / 1000))

    # ---- failed attempts ----------------------------------------------------
    async def get_attempts(self, email: str) -> int:
        """Failed attempts in the current window; 0 when not cached."""
        record = await self._get(self.attempt_keys.entity(_email(email)), LoginAttempts)
        return record.attempts if record is not None else 0

    async def set_attempts(self, email: str, attempts: int, ttl: int = ATTEMPTS_TTL) -> bool:
        return await self._set(
            self.attempt_keys.entity(_email(email)), LoginAttempts(attempts=attempts), ttl
        )

    async def remove_attempts(self, email: str) -> bool:
        return await self._delete(self.attempt_keys.entity(_email(email)))

    async def record_failed_attempt(
        self,
        email: str,
        max_attempts: int = MAX_LOGIN_ATTEMPTS,
        lockout_seconds: int = LOCKOUT_SECONDS,
    ) -> int:
        """
        Count one failed login and lock the account once ``max_attempts`` is reached.

        The lockout record expires together with its duration and the attempt
        counter is reset when the lock is placed.

        Returns:
            Attempts counted so far, including this one
        """
        attempts = await self.get_attempts(email) + 1
        if attempts < max_attempts:
            await self.set_attempts(email, attempts)
            return attempts

        logger.info(
            f"Locking account '{_email(email)}' for {lockout_seconds}s after {attempts} attempts"
        )
        await self.set_lockout(
            email,
            LockoutSession(locked_at=_now_ms(), duration=lockout_seconds),
            ttl=lockout_seconds,
        )
        await self.remove_attempts(email)
        return attempts

    async def clear_attempts(self, email: str) -> bool:
        """Forget attempts and any lockout, e.g. after a successful login."""
        attempts_removed = await self.remove_attempts(email)
        lockout_removed = await self.remove_lockout(email)
        return attempts_removed and lockout_removed
