"""Infrastructure verification script.

Starts the three Temporal workers in one process, runs SyncChannelsWorkflow
and DiscoverInstancesWorkflow against the configured Chatwoot account and
Evolution gateway, and prints the reconciled view.

Read-only: nothing is created, paired or deleted. A missing credential makes
the corresponding read fail gracefully; the workflow still completes with
partial_failure set, which is enough to verify dispatch across queues.

Prerequisites:
  - Temporal dev server running: `temporal server start-dev`
    OR Temporal Cloud credentials in the environment
  - CHATWOOT_ACCOUNT_ID set (plus CHATWOOT_API_TOKEN / EVOLUTION_API_KEY for real data)

Usage:
  python scripts/verify_channels.py
"""

import asyncio
import logging
import uuid
from contextlib import AsyncExitStack

from inbox_channel_manager.client import build_sync_request, discover_instances, sync_channels
from inbox_shared.service_config import load_service_configs
from inbox_shared.temporal_client import connect
from inbox_workers.registry import COMPONENTS
from temporalio.worker import Worker

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main() -> None:
    """Start workers, run both sync workflows, report the result."""
    configs = load_service_configs()
    client = await connect()
    logger.info("Connected to Temporal server")

    async with AsyncExitStack() as stack:
        for component in COMPONENTS.values():
            await stack.enter_async_context(
                Worker(
                    client,
                    task_queue=component.task_queue,
                    workflows=component.workflows,
                    activities=component.activities,
                )
            )
        logger.info(f"All {len(COMPONENTS)} workers started — dispatching SyncChannelsWorkflow")

        request = build_sync_request(configs)
        result = await sync_channels(client, request, f"verify-sync-{uuid.uuid4()}")
        logger.info(f"Reconciliation: {result.message}")
        for failure in result.source_failures:
            logger.warning(f"  source '{failure.source}' failed: {failure.message}")
        for item in result.items:
            logger.info(
                f"  [{item.identity_key:>4}] {item.display_name:<30} "
                f"{item.platform_category:<17} {item.connection_status}"
            )
        stats = result.stats
        logger.info(
            f"Stats: total={stats.total} connected={stats.connected_count} "
            f"disconnected={stats.disconnected_count} connecting={stats.connecting_count} "
            f"maturation={stats.maturation_count}"
        )

        report = await discover_instances(client, request, f"verify-discover-{uuid.uuid4()}")
        logger.info(
            f"Discovery: newly_discovered={report.newly_discovered} "
            f"already_linked={report.already_linked}"
        )

        assert result.stats.total == len(result.items), "Stats disagree with the item list"
        logger.info("VERIFICATION PASSED — activities dispatched across all three queues")


if __name__ == "__main__":
    asyncio.run(main())
