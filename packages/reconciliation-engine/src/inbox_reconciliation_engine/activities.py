"""Reconciliation Engine activities — pure business logic on the engine queue.

Run on RECONCILIATION_ENGINE_QUEUE. Workflows fetch the two source lists
through Channel Access, then hand them here. No I/O happens in these
activities; they exist so the matching logic runs outside workflow code and
can change without breaking workflow determinism.

  reconcile_channel_lists — merged item list + stats
  partition_channel_names — newly discovered vs already linked names
"""

from inbox_shared.channel_models import ReconcileRequest, ReconciliationResult, SyncReport
from temporalio import activity

from inbox_reconciliation_engine.sync import build_reconciliation_result, build_sync_report


@activity.defn
async def reconcile_channel_lists(request: ReconcileRequest) -> ReconciliationResult:
    """Reconcile and classify two already-fetched lists."""
    activity.logger.info(
        f"Reconciling {len(request.channels)} channels with {len(request.instances)} instances"
    )
    return build_reconciliation_result(
        request.channels, request.instances, request.source_failures
    )


@activity.defn
async def partition_channel_names(request: ReconcileRequest) -> SyncReport:
    """Partition gateway instance names by whether a platform channel exists."""
    return build_sync_report(request.channels, request.instances, request.source_failures)
