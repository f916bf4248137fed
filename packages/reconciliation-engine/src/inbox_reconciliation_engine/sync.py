"""Sync orchestration — fetch both sources concurrently, then reconcile.

Both reads are independent and run together. A failed read never blocks the
other: it degrades to an empty list plus a SourceFailure, and the result is
flagged partial_failure so the caller can still render what succeeded.

Every call starts from a fresh pair of fetches. There is no cache and no
memory between calls; caching, if any, belongs to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol

from inbox_shared.access_models import ChannelListResult, InstanceListResult
from inbox_shared.channel_models import (
    ChannelRecord,
    InstanceRecord,
    ReconciliationResult,
    SourceFailure,
    SyncReport,
)
from inbox_shared.models import ErrorKind

from inbox_reconciliation_engine.classifier import classify
from inbox_reconciliation_engine.matcher import reconcile

logger = logging.getLogger(__name__)

CHANNEL_SOURCE = "channels"
INSTANCE_SOURCE = "instances"


class ChannelSource(Protocol):
    async def list_channels(self, access_token: str = "") -> ChannelListResult: ...


class InstanceSource(Protocol):
    async def list_instances(self, access_token: str = "") -> InstanceListResult: ...


def _source_failure(source: str, message: str) -> SourceFailure:
    logger.warning(f"Source '{source}' unavailable, continuing with an empty list: {message}")
    return SourceFailure(
        source=source,
        error_kind=ErrorKind.SOURCE_UNAVAILABLE,
        message=message,
    )


def partition_names(
    channel_names: Sequence[str],
    instance_names: Sequence[str],
) -> tuple[list[str], list[str]]:
    """Split instance names into (newly_discovered, already_linked).

    Names are compared exactly as the services return them, so "Loja-01"
    and "loja 01" are different here; the normalized pairing is reconcile().
    Duplicates and input order are kept.
    """
    channel_set = set(channel_names)
    newly_discovered: list[str] = []
    already_linked: list[str] = []
    for name in instance_names:
        if name in channel_set:
            already_linked.append(name)
        else:
            newly_discovered.append(name)
    return newly_discovered, already_linked


def build_reconciliation_result(
    channels: Sequence[ChannelRecord],
    instances: Sequence[InstanceRecord],
    source_failures: Sequence[SourceFailure] = (),
) -> ReconciliationResult:
    """Reconcile + classify two already-fetched lists into one result."""
    items = reconcile(channels, instances)
    stats = classify(
        items,
        channel_source_count=len(channels),
        instance_source_count=len(instances),
    )
    failures = list(source_failures)
    all_failed = len({f.source for f in failures}) >= 2
    return ReconciliationResult(
        success=not all_failed,
        message=(
            f"Reconciled {stats.total} items "
            f"({stats.digital_platform_count} digital platform, "
            f"{stats.maturation_count} maturation)"
            if not all_failed
            else "Both channel sources are unavailable"
        ),
        error_kind=ErrorKind.SOURCE_UNAVAILABLE if failures else None,
        items=items,
        stats=stats,
        partial_failure=bool(failures),
        source_failures=failures,
    )


def build_sync_report(
    channels: Sequence[ChannelRecord],
    instances: Sequence[InstanceRecord],
    source_failures: Sequence[SourceFailure] = (),
) -> SyncReport:
    """Name-set-only partition of instance names against channel names."""
    newly_discovered, already_linked = partition_names(
        [c.name for c in channels], [i.name for i in instances]
    )
    failures = list(source_failures)
    return SyncReport(
        success=len({f.source for f in failures}) < 2,
        message=(
            f"{len(newly_discovered)} newly discovered, {len(already_linked)} already linked"
        ),
        error_kind=ErrorKind.SOURCE_UNAVAILABLE if failures else None,
        newly_discovered=newly_discovered,
        already_linked=already_linked,
        partial_failure=bool(failures),
        source_failures=failures,
    )


class SyncOrchestrator:
    """Top-level entry point for a reconciliation pass."""

    def __init__(self, channel_source: ChannelSource, instance_source: InstanceSource) -> None:
        self.channel_source = channel_source
        self.instance_source = instance_source

    async def _fetch_channels(
        self, access_token: str
    ) -> tuple[list[ChannelRecord], SourceFailure | None]:
        try:
            result = await self.channel_source.list_channels(access_token)
        except Exception as e:
            return [], _source_failure(CHANNEL_SOURCE, str(e))
        if not result.success:
            return [], _source_failure(CHANNEL_SOURCE, result.message)
        return list(result.channels), None

    async def _fetch_instances(
        self, access_token: str
    ) -> tuple[list[InstanceRecord], SourceFailure | None]:
        try:
            result = await self.instance_source.list_instances(access_token)
        except Exception as e:
            return [], _source_failure(INSTANCE_SOURCE, str(e))
        if not result.success:
            return [], _source_failure(INSTANCE_SOURCE, result.message)
        return list(result.instances), None

    async def fetch_sources(
        self, access_token: str = ""
    ) -> tuple[list[ChannelRecord], list[InstanceRecord], list[SourceFailure]]:
        """Read both sources concurrently. Each one degrades to [] on failure."""
        (channels, channel_failure), (instances, instance_failure) = await asyncio.gather(
            self._fetch_channels(access_token),
            self._fetch_instances(access_token),
        )
        failures = [f for f in (channel_failure, instance_failure) if f is not None]
        return channels, instances, failures

    async def reconcile_channels(self, access_token: str = "") -> ReconciliationResult:
        """Full pass: fetch, reconcile, classify."""
        channels, instances, failures = await self.fetch_sources(access_token)
        result = build_reconciliation_result(channels, instances, failures)
        logger.info(result.message)
        return result

    async def sync(self, access_token: str = "") -> SyncReport:
        """Coarse pass: which gateway instance names have no platform channel yet."""
        channels, instances, failures = await self.fetch_sources(access_token)
        report = build_sync_report(channels, instances, failures)
        logger.info(f"Sync: {report.message}")
        return report
