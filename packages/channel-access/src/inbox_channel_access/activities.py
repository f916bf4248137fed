"""Channel Access activities — Temporal activity functions for the external channel services.

These run on the channel-access worker (CHANNEL_ACCESS_QUEUE). The Channel
Manager's workflows dispatch to this queue whenever they need to read from or
write to Chatwoot, the Evolution gateway, or the n8n webhooks.

Each activity is an atomic business verb:

  list_channels        — registered channels from the conversation platform
  list_instances       — instances from the WhatsApp gateway
  create_channel       — register a channel (validated before any call)
  update_channel       — rename / retype a channel
  delete_channel       — delete a channel
  request_pairing_code — ask the webhook for a pairing QR code
  delete_instance      — delete a gateway instance
  logout_instance      — unpair the phone from a gateway instance
  provision_instance   — create a channel + gateway instance via the webhook
  check_gateway        — connectivity check for any configured service

Each activity creates a connector via the factory, delegates the work, and
ensures the HTTP client is closed afterward. Expected failures come back as
result objects; only a misconfigured service type raises.
"""

from typing import TypeVar

from inbox_shared.access_models import (
    ChannelListResult,
    ChannelMutationRequest,
    ChannelMutationResult,
    GatewayActionResult,
    InstanceActionRequest,
    InstanceListResult,
    ListRequest,
    PairingResult,
    ProvisionRequest,
    ProvisionResult,
    ServiceCheckResult,
)
from inbox_shared.models import ErrorKind
from inbox_shared.service_config import ServiceConfig
from temporalio import activity

from inbox_channel_access.connectors import get_connector
from inbox_channel_access.connectors.base import BaseConnector
from inbox_channel_access.connectors.chatwoot import ChatwootConnector
from inbox_channel_access.connectors.evolution import EvolutionConnector
from inbox_channel_access.connectors.n8n import N8nWebhookConnector

ConnectorT = TypeVar("ConnectorT", bound=BaseConnector)

# Requests carry no token (they are kept in workflow history). An empty token
# makes each connector authenticate with the service credential named by
# ServiceConfig.auth_env_var, read from this worker's environment.
WORKER_CREDENTIAL = ""


def _connector(config: ServiceConfig, expected: type[ConnectorT]) -> ConnectorT:
    """Build a connector and check it's the kind this activity needs."""
    connector = get_connector(config)
    if not isinstance(connector, expected):
        raise ValueError(
            f"Service '{config.service_id}' is a {config.service_type} service, "
            f"expected {expected.__name__}"
        )
    return connector


@activity.defn
async def list_channels(request: ListRequest) -> ChannelListResult:
    """Fetch the registered channels of the configured Chatwoot account."""
    activity.logger.info(f"Listing channels from '{request.config.service_id}'")
    connector = _connector(request.config, ChatwootConnector)
    try:
        return await connector.list_channels(WORKER_CREDENTIAL)
    finally:
        await connector.close()


@activity.defn
async def list_instances(request: ListRequest) -> InstanceListResult:
    """Fetch every instance the WhatsApp gateway knows about."""
    activity.logger.info(f"Listing instances from '{request.config.service_id}'")
    connector = _connector(request.config, EvolutionConnector)
    try:
        return await connector.list_instances(WORKER_CREDENTIAL)
    finally:
        await connector.close()


@activity.defn
async def create_channel(request: ChannelMutationRequest) -> ChannelMutationResult:
    """Register a new channel on the conversation platform."""
    if request.draft is None:
        return ChannelMutationResult(
            success=False,
            message="Channel fields are required",
            error_kind=ErrorKind.VALIDATION_ERROR,
        )
    connector = _connector(request.config, ChatwootConnector)
    try:
        return await connector.create_channel(WORKER_CREDENTIAL, request.draft)
    finally:
        await connector.close()


@activity.defn
async def update_channel(request: ChannelMutationRequest) -> ChannelMutationResult:
    """Rename or retype an existing channel."""
    if request.channel_id is None or request.draft is None:
        return ChannelMutationResult(
            success=False,
            message="Channel id and fields are required",
            error_kind=ErrorKind.VALIDATION_ERROR,
        )
    connector = _connector(request.config, ChatwootConnector)
    try:
        return await connector.update_channel(
            WORKER_CREDENTIAL, request.channel_id, request.draft
        )
    finally:
        await connector.close()


@activity.defn
async def delete_channel(request: ChannelMutationRequest) -> ChannelMutationResult:
    """Delete a channel from the conversation platform."""
    if request.channel_id is None:
        return ChannelMutationResult(
            success=False,
            message="Channel id is required",
            error_kind=ErrorKind.VALIDATION_ERROR,
        )
    connector = _connector(request.config, ChatwootConnector)
    try:
        return await connector.delete_channel(WORKER_CREDENTIAL, request.channel_id)
    finally:
        await connector.close()


@activity.defn
async def request_pairing_code(request: InstanceActionRequest) -> PairingResult:
    """Ask the n8n webhook for a pairing QR code, keyed by the gateway instance name."""
    activity.logger.info(f"Requesting pairing code for instance '{request.instance_name}'")
    connector = _connector(request.config, N8nWebhookConnector)
    try:
        return await connector.request_pairing_code(
            WORKER_CREDENTIAL, request.instance_name, request.timeout_seconds
        )
    finally:
        await connector.close()


@activity.defn
async def delete_instance(request: InstanceActionRequest) -> GatewayActionResult:
    """Delete a gateway instance. The workflow only calls this for maturation items."""
    activity.logger.info(f"Deleting gateway instance '{request.instance_name}'")
    connector = _connector(request.config, EvolutionConnector)
    try:
        return await connector.delete_instance(WORKER_CREDENTIAL, request.instance_name)
    finally:
        await connector.close()


@activity.defn
async def logout_instance(request: InstanceActionRequest) -> GatewayActionResult:
    """Unpair the phone from a gateway instance, keeping the instance."""
    activity.logger.info(f"Logging out gateway instance '{request.instance_name}'")
    connector = _connector(request.config, EvolutionConnector)
    try:
        return await connector.logout_instance(WORKER_CREDENTIAL, request.instance_name)
    finally:
        await connector.close()


@activity.defn
async def provision_instance(request: ProvisionRequest) -> ProvisionResult:
    """Create a channel and its gateway instance through the n8n provisioning webhook."""
    activity.logger.info(f"Provisioning channel '{request.draft.name}'")
    connector = _connector(request.config, N8nWebhookConnector)
    try:
        return await connector.provision_instance(
            WORKER_CREDENTIAL, request.draft, request.timeout_seconds
        )
    finally:
        await connector.close()


@activity.defn
async def check_gateway(config: ServiceConfig) -> ServiceCheckResult:
    """Lightweight connectivity check against any configured service."""
    activity.logger.info(f"Checking connectivity to {config.service_type} '{config.service_id}'")
    connector = get_connector(config)
    try:
        return await connector.check_connection()
    finally:
        await connector.close()
