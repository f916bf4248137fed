"""Caller-side helpers for starting Channel Manager workflows.

The UI layer (or a script) holds a Temporal client and calls these instead of
building workflow ids and queues by hand. connect_channel starts
ConnectChannelWorkflow under connect_workflow_id(instance_name): Temporal
refuses a second running workflow with that id, and the refusal comes back
as an in_flight outcome rather than an exception.

The build_*_request helpers turn the loaded ServiceConfigs into workflow
inputs, so PAIRING_TIMEOUT_SECONDS reaches the pairing budget.
"""

import logging

from inbox_reconciliation_engine.normalize import normalize_name
from inbox_shared.channel_models import (
    ReconciledItem,
    ReconciliationResult,
    SyncChannelsRequest,
    SyncReport,
)
from inbox_shared.connection_models import (
    ConnectChannelRequest,
    ConnectionOutcome,
    ConnectionState,
    DeleteInstanceRequest,
    DeletionOutcome,
)
from inbox_shared.models import ErrorKind
from inbox_shared.service_config import ServiceConfigs
from inbox_shared.task_queues import CHANNEL_MANAGER_QUEUE
from temporalio.client import Client
from temporalio.exceptions import WorkflowAlreadyStartedError

from inbox_channel_manager.workflows.connect import ConnectChannelWorkflow, connect_workflow_id
from inbox_channel_manager.workflows.delete import DeleteMaturationInstanceWorkflow
from inbox_channel_manager.workflows.sync import DiscoverInstancesWorkflow, SyncChannelsWorkflow

logger = logging.getLogger(__name__)


def build_sync_request(configs: ServiceConfigs) -> SyncChannelsRequest:
    return SyncChannelsRequest(chatwoot=configs.chatwoot, evolution=configs.evolution)


def build_connect_request(configs: ServiceConfigs, item: ReconciledItem) -> ConnectChannelRequest:
    """Pairing request bounded by the configured PAIRING_TIMEOUT_SECONDS."""
    return ConnectChannelRequest(
        webhook=configs.n8n,
        item=item,
        timeout_seconds=configs.pairing_timeout_seconds,
    )


def build_delete_request(configs: ServiceConfigs, item: ReconciledItem) -> DeleteInstanceRequest:
    return DeleteInstanceRequest(gateway=configs.evolution, item=item)


async def sync_channels(
    client: Client, request: SyncChannelsRequest, workflow_id: str
) -> ReconciliationResult:
    return await client.execute_workflow(
        SyncChannelsWorkflow.run,
        request,
        id=workflow_id,
        task_queue=CHANNEL_MANAGER_QUEUE,
    )


async def discover_instances(
    client: Client, request: SyncChannelsRequest, workflow_id: str
) -> SyncReport:
    return await client.execute_workflow(
        DiscoverInstancesWorkflow.run,
        request,
        id=workflow_id,
        task_queue=CHANNEL_MANAGER_QUEUE,
    )


async def connect_channel(client: Client, request: ConnectChannelRequest) -> ConnectionOutcome:
    """Run one pairing request; a concurrent request for the same instance is refused."""
    detail = request.item.gateway_detail
    name = detail.instance_name if detail is not None else request.item.display_name
    try:
        return await client.execute_workflow(
            ConnectChannelWorkflow.run,
            request,
            id=connect_workflow_id(name),
            task_queue=CHANNEL_MANAGER_QUEUE,
        )
    except WorkflowAlreadyStartedError:
        logger.info(f"Pairing for '{name}' already in flight; refusing duplicate request")
        return ConnectionOutcome(
            success=False,
            message=f"A pairing request for '{name}' is already in progress",
            error_kind=ErrorKind.IN_FLIGHT,
            identity_key=request.item.identity_key,
            instance_name=name,
            state=ConnectionState.FAILED,
            item_status=request.item.connection_status,
        )


async def delete_maturation_instance(
    client: Client, request: DeleteInstanceRequest
) -> DeletionOutcome:
    detail = request.item.gateway_detail
    name = detail.instance_name if detail is not None else request.item.display_name
    return await client.execute_workflow(
        DeleteMaturationInstanceWorkflow.run,
        request,
        id=f"delete-{normalize_name(name) or name}",
        task_queue=CHANNEL_MANAGER_QUEUE,
    )
