"""Connection workflow models — the pairing and deletion state machines.

Pairing:   idle → requesting → awaiting_scan | failed | timed_out
Deletion:  idle → deleting → deleted | failed

awaiting_scan is as far as the engine goes. The QR payload is handed to the
caller for display, and the move to linked is only observed by a later
reconciliation pass that sees the gateway report "open".
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel

from inbox_shared.channel_models import ConnectionStatus, ReconciledItem
from inbox_shared.models import PlatformResult
from inbox_shared.service_config import DEFAULT_PAIRING_TIMEOUT_SECONDS, ServiceConfig


class ConnectionState(StrEnum):
    IDLE = "idle"
    REQUESTING = "requesting"
    AWAITING_SCAN = "awaiting_scan"
    LINKED = "linked"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    DELETING = "deleting"
    DELETED = "deleted"


class ConnectionOutcome(PlatformResult):
    """Result of request_connection.

    item_status is the item's status before the request. The engine never
    reports a connection it hasn't observed.
    """

    identity_key: int
    instance_name: str = ""
    state: ConnectionState
    item_status: ConnectionStatus = ConnectionStatus.UNKNOWN
    qr_code_base64: str | None = None


class DeletionOutcome(PlatformResult):
    """Result of delete_maturation_instance."""

    identity_key: int
    instance_name: str = ""
    state: ConnectionState


class ConnectChannelRequest(BaseModel):
    """Input for ConnectChannelWorkflow."""

    webhook: ServiceConfig
    item: ReconciledItem
    timeout_seconds: float = DEFAULT_PAIRING_TIMEOUT_SECONDS


class DeleteInstanceRequest(BaseModel):
    """Input for DeleteMaturationInstanceWorkflow."""

    gateway: ServiceConfig
    item: ReconciledItem
