"""SyncChannelsWorkflow / DiscoverInstancesWorkflow: Channel Access → Reconciliation Engine.

Both workflows read the two source lists concurrently from the channel-access
queue, degrade a failed read to an empty list, then hand both lists to the
reconciliation-engine queue:

1. Channel Access (channel-access-queue): list_channels + list_instances
2. Reconciliation Engine (reconciliation-engine-queue): reconcile or partition

A failed read never fails the workflow. The result carries partial_failure
and the SourceFailure entries instead.
"""

import asyncio
from datetime import timedelta

from temporalio import workflow
from temporalio.exceptions import ActivityError

with workflow.unsafe.imports_passed_through():
    from inbox_channel_access.activities import list_channels, list_instances
    from inbox_reconciliation_engine.activities import (
        partition_channel_names,
        reconcile_channel_lists,
    )
    from inbox_reconciliation_engine.sync import CHANNEL_SOURCE, INSTANCE_SOURCE
    from inbox_shared.access_models import ListRequest
    from inbox_shared.channel_models import (
        ChannelRecord,
        InstanceRecord,
        ReconcileRequest,
        ReconciliationResult,
        SourceFailure,
        SyncChannelsRequest,
        SyncReport,
    )
    from inbox_shared.task_queues import CHANNEL_ACCESS_QUEUE, RECONCILIATION_ENGINE_QUEUE

    from inbox_channel_manager.workflows import SINGLE_ATTEMPT

SOURCE_READ_TIMEOUT = timedelta(seconds=60)
ENGINE_TIMEOUT = timedelta(seconds=30)


async def _read_channels(
    request: SyncChannelsRequest,
) -> tuple[list[ChannelRecord], SourceFailure | None]:
    try:
        result = await workflow.execute_activity(
            list_channels,
            ListRequest(config=request.chatwoot),
            task_queue=CHANNEL_ACCESS_QUEUE,
            start_to_close_timeout=SOURCE_READ_TIMEOUT,
            retry_policy=SINGLE_ATTEMPT,
        )
    except ActivityError as e:
        return [], SourceFailure(source=CHANNEL_SOURCE, message=str(e.cause or e))
    if not result.success:
        return [], SourceFailure(source=CHANNEL_SOURCE, message=result.message)
    return result.channels, None


async def _read_instances(
    request: SyncChannelsRequest,
) -> tuple[list[InstanceRecord], SourceFailure | None]:
    try:
        result = await workflow.execute_activity(
            list_instances,
            ListRequest(config=request.evolution),
            task_queue=CHANNEL_ACCESS_QUEUE,
            start_to_close_timeout=SOURCE_READ_TIMEOUT,
            retry_policy=SINGLE_ATTEMPT,
        )
    except ActivityError as e:
        return [], SourceFailure(source=INSTANCE_SOURCE, message=str(e.cause or e))
    if not result.success:
        return [], SourceFailure(source=INSTANCE_SOURCE, message=result.message)
    return result.instances, None


async def _read_sources(request: SyncChannelsRequest) -> ReconcileRequest:
    (channels, channel_failure), (instances, instance_failure) = await asyncio.gather(
        _read_channels(request),
        _read_instances(request),
    )
    failures = [f for f in (channel_failure, instance_failure) if f is not None]
    for failure in failures:
        workflow.logger.warning(
            f"Source '{failure.source}' unavailable, degrading to empty: {failure.message}"
        )
    return ReconcileRequest(channels=channels, instances=instances, source_failures=failures)


@workflow.defn
class SyncChannelsWorkflow:
    """Full reconciliation pass: merged items, stats, partial-failure flag."""

    @workflow.run
    async def run(self, request: SyncChannelsRequest) -> ReconciliationResult:
        lists = await _read_sources(request)
        return await workflow.execute_activity(
            reconcile_channel_lists,
            lists,
            task_queue=RECONCILIATION_ENGINE_QUEUE,
            start_to_close_timeout=ENGINE_TIMEOUT,
            retry_policy=SINGLE_ATTEMPT,
        )


@workflow.defn
class DiscoverInstancesWorkflow:
    """Coarse pass: which gateway instances have no platform channel yet."""

    @workflow.run
    async def run(self, request: SyncChannelsRequest) -> SyncReport:
        lists = await _read_sources(request)
        return await workflow.execute_activity(
            partition_channel_names,
            lists,
            task_queue=RECONCILIATION_ENGINE_QUEUE,
            start_to_close_timeout=ENGINE_TIMEOUT,
            retry_policy=SINGLE_ATTEMPT,
        )
