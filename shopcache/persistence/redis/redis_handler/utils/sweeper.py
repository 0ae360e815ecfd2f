from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from pydantic import BaseModel, Field

from ...ops import delete, scan
from ...redis_client import DEFAULT_STORE, StoreAlias
from .key_factory import KeyFactory

logger = logging.getLogger("InvalidationSweeper")


class SweepPlan(BaseModel):
    """Keys of one domain split into the ordered deletion phases."""

    list_keys: list[str] = Field(default_factory=list)
    count_keys: list[str] = Field(default_factory=list)

    @property
    def phases(self) -> tuple[tuple[str, list[str]], ...]:
        """Deletion order: every list key goes before any count key."""
        return (("list", self.list_keys), ("count", self.count_keys))

    @property
    def total(self) -> int:
        return len(self.list_keys) + len(self.count_keys)


class SweepReport(BaseModel):
    """What a sweep removed, per phase."""

    scanned: int = 0
    deleted: dict[str, int] = Field(default_factory=dict)
    failed: dict[str, int] = Field(default_factory=dict)
    aborted: bool = False

    @property
    def total_deleted(self) -> int:
        return sum(self.deleted.values())


class InvalidationSweeper:
    """
    Drops every cached page and count of one domain.

    Runs as a two-phase pipeline. Phase "list" deletes all paginated-array
    keys and completes before phase "count" starts, so a reader can observe
    a missing count next to a missing list but never a count next to a list
    it no longer describes. Deletes inside a phase run concurrently.

    Best-effort: a failed delete is logged and counted, never retried or
    raised. A surviving entry expires at its TTL. When the enumeration itself
    fails or times out nothing is deleted and the report is marked aborted.
    """

    def __init__(self, keys: KeyFactory, store: StoreAlias = DEFAULT_STORE) -> None:
        self.keys = keys
        self.store = store

    def plan(self, keys: Iterable[str]) -> SweepPlan:
        """Partition ``keys`` client-side; keys of other domains are ignored."""
        plan = SweepPlan()
        for key in keys:
            if self.keys.is_count_key(key):
                plan.count_keys.append(key)
            elif self.keys.is_list_key(key):
                plan.list_keys.append(key)
        return plan

    async def _run_phase(self, name: str, keys: list[str]) -> tuple[int, int]:
        if not keys:
            return 0, 0
        results = await asyncio.gather(*(delete(k, store=self.store) for k in keys))
        deleted = sum(1 for ok in results if ok)
        failed = len(results) - deleted
        if failed:
            logger.warning(
                f"Sweep phase '{name}' for '{self.keys.prefix}' left {failed} key(s) behind"
            )
        return deleted, failed

    async def run(self) -> SweepReport:
        """Enumerate the store, plan, and delete phase by phase."""
        result = await scan("*", store=self.store)
        if result.error is not None:
            logger.error(
                f"Sweep of '{self.keys.prefix}*' on '{self.store}' skipped: {result.error}"
            )
            return SweepReport(aborted=True)
        all_keys = result.value or []
        plan = self.plan(all_keys)
        report = SweepReport(scanned=len(all_keys))

        for name, phase_keys in plan.phases:
            deleted, failed = await self._run_phase(name, phase_keys)
            report.deleted[name] = deleted
            report.failed[name] = failed

        if plan.total:
            logger.info(
                f"Cache INVALIDATE: {self.keys.prefix}* on '{self.store}' "
                f"(lists: {report.deleted['list']}, counts: {report.deleted['count']})"
            )
        return report
