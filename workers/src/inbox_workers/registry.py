"""Component registry: maps component names to their workflows and activities.

The runner looks up the CLI argument here to decide what to register on a
worker. Each component entry specifies:

- task_queue: Which Temporal task queue this worker polls
- workflows: Workflow classes to register (only the Channel Manager has these)
- activities: Activity functions to register
- required_env: Credentials the activities read from the worker's own
  environment (workflow inputs never carry them)
"""

from dataclasses import dataclass, field
from typing import Any

from inbox_channel_access.activities import (
    check_gateway,
    create_channel,
    delete_channel,
    delete_instance,
    list_channels,
    list_instances,
    logout_instance,
    provision_instance,
    request_pairing_code,
    update_channel,
)
from inbox_channel_manager.workflows.connect import ConnectChannelWorkflow
from inbox_channel_manager.workflows.delete import DeleteMaturationInstanceWorkflow
from inbox_channel_manager.workflows.sync import (
    DiscoverInstancesWorkflow,
    SyncChannelsWorkflow,
)
from inbox_reconciliation_engine.activities import (
    partition_channel_names,
    reconcile_channel_lists,
)
from inbox_shared.task_queues import (
    CHANNEL_ACCESS_QUEUE,
    CHANNEL_MANAGER_QUEUE,
    RECONCILIATION_ENGINE_QUEUE,
)


@dataclass
class ComponentConfig:
    """Configuration for a single component's worker."""

    task_queue: str
    workflows: list[Any] = field(default_factory=list)
    activities: list[Any] = field(default_factory=list)
    required_env: list[str] = field(default_factory=list)


COMPONENTS: dict[str, ComponentConfig] = {
    "channel-manager": ComponentConfig(
        task_queue=CHANNEL_MANAGER_QUEUE,
        workflows=[
            SyncChannelsWorkflow,
            DiscoverInstancesWorkflow,
            ConnectChannelWorkflow,
            DeleteMaturationInstanceWorkflow,
        ],
    ),
    "channel-access": ComponentConfig(
        task_queue=CHANNEL_ACCESS_QUEUE,
        activities=[
            list_channels,
            list_instances,
            create_channel,
            update_channel,
            delete_channel,
            request_pairing_code,
            delete_instance,
            logout_instance,
            provision_instance,
            check_gateway,
        ],
        required_env=["CHATWOOT_API_TOKEN", "EVOLUTION_API_KEY"],
    ),
    "reconciliation-engine": ComponentConfig(
        task_queue=RECONCILIATION_ENGINE_QUEUE,
        activities=[reconcile_channel_lists, partition_channel_names],
    ),
}
