"""Channel domain models — registered channels, gateway instances, and the merged view.

Two systems each keep their own list of WhatsApp channels:

  - Chatwoot (the conversation platform) holds *registered channels*, keyed by
    a stable integer id and a user-entered, mutable name.
  - The Evolution gateway holds *instances*, keyed by a gateway-assigned name
    that is effectively immutable once provisioned.

The reconciliation engine merges both into ReconciledItem objects. These are
derived, never persisted, and recomputed on every pass.

Design choices:
  - Optional fields on InstanceRecord are explicit (linked_channel_info may be
    absent entirely). Adapters reject malformed records before they get here.
  - ReconciledItem.identity_key is the Chatwoot id for channel-origin items and
    a synthetic negative key for gateway-only items. Negative keys are only
    unique within one pass, never store them.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel

from inbox_shared.models import ErrorKind, PlatformResult
from inbox_shared.service_config import ServiceConfig

# Channel type assigned to items that exist only on the gateway.
GATEWAY_CHANNEL_TYPE = "evolution_api"


class PlatformCategory(StrEnum):
    DIGITAL_PLATFORM = "digital_platform"
    MATURATION = "maturation"


class ConnectionStatus(StrEnum):
    OPEN = "open"
    CONNECTING = "connecting"
    CLOSE = "close"
    UNKNOWN = "unknown"

    @classmethod
    def from_gateway(cls, raw: str | None) -> ConnectionStatus:
        """Map a gateway status string onto the four known states."""
        if raw:
            try:
                return cls(raw.strip().lower())
            except ValueError:
                pass
        return cls.UNKNOWN


# ============================================================================
# Source records
# ============================================================================


class ChannelRecord(BaseModel):
    """A channel (inbox) registered on the conversation platform."""

    id: int
    name: str
    channel_type: str = ""
    account_id: int


class LinkedChannelInfo(BaseModel):
    """The gateway's own belief about which platform channel it feeds."""

    enabled: bool = False
    linked_channel_name: str | None = None


class InstanceRecord(BaseModel):
    """A WhatsApp instance as reported by the gateway."""

    name: str
    connection_status: str = ""  # open, connecting, close, or anything else
    owner_identifier: str | None = None  # "5511999999999@s.whatsapp.net"
    profile_display_name: str | None = None
    integration_kind: str = ""
    linked_channel_info: LinkedChannelInfo | None = None
    message_count: int = 0
    contact_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def phone_number(self) -> str | None:
        if not self.owner_identifier:
            return None
        return self.owner_identifier.split("@", 1)[0] or None

    @property
    def linked_channel_name(self) -> str | None:
        if self.linked_channel_info is None:
            return None
        return self.linked_channel_info.linked_channel_name


# ============================================================================
# Reconciled view
# ============================================================================


class GatewayDetail(BaseModel):
    """Gateway-side facts attached to a reconciled item for display and actions.

    instance_name is the gateway's own identifier: pairing and deletion are
    always keyed by it, never by the platform display name.
    """

    instance_name: str
    connection_status: ConnectionStatus = ConnectionStatus.UNKNOWN
    owner_identifier: str | None = None
    phone_number: str | None = None
    profile_display_name: str | None = None
    integration_kind: str = ""
    linked_enabled: bool = False
    linked_channel_name: str | None = None
    message_count: int = 0
    contact_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReconciledItem(BaseModel):
    """One row of the merged channel view."""

    identity_key: int
    display_name: str
    channel_type: str
    platform_category: PlatformCategory
    gateway_origin: bool = False
    connection_status: ConnectionStatus = ConnectionStatus.UNKNOWN
    gateway_detail: GatewayDetail | None = None

    @property
    def can_edit_on_platform(self) -> bool:
        """Edit/delete through Chatwoot is only legal for channel-origin items."""
        return not self.gateway_origin

    @property
    def can_delete_on_gateway(self) -> bool:
        """Only maturation instances have no platform channel to protect."""
        return (
            self.platform_category == PlatformCategory.MATURATION
            and self.gateway_detail is not None
        )


class ChannelStats(BaseModel):
    """Aggregate counts over a reconciled list.

    unknown-status items count toward total but toward none of the three
    status buckets: a channel with no gateway linkage has no connection.
    """

    total: int = 0
    digital_platform_count: int = 0
    maturation_count: int = 0
    connected_count: int = 0
    disconnected_count: int = 0
    connecting_count: int = 0
    with_gateway_detail_count: int = 0
    without_gateway_detail_count: int = 0
    channel_source_count: int = 0
    instance_source_count: int = 0


class SourceFailure(BaseModel):
    """One source read that failed and was degraded to an empty list."""

    source: str  # channels, instances
    error_kind: ErrorKind = ErrorKind.SOURCE_UNAVAILABLE
    message: str = ""


class ReconciliationResult(PlatformResult):
    """Returned by a full reconciliation pass."""

    items: list[ReconciledItem] = []
    stats: ChannelStats = ChannelStats()
    partial_failure: bool = False
    source_failures: list[SourceFailure] = []


class SyncReport(PlatformResult):
    """Name-set-only view of a sync pass.

    newly_discovered holds gateway instance names that do not appear verbatim
    among the platform channel names; already_linked holds those that do.
    """

    newly_discovered: list[str] = []
    already_linked: list[str] = []
    partial_failure: bool = False
    source_failures: list[SourceFailure] = []


# ============================================================================
# Engine and workflow inputs
# ============================================================================


class ReconcileRequest(BaseModel):
    """Input for reconcile_channel_lists / partition_channel_names.

    source_failures records reads the workflow already degraded to empty lists,
    so the partial-failure flag survives into the result.
    """

    channels: list[ChannelRecord] = []
    instances: list[InstanceRecord] = []
    source_failures: list[SourceFailure] = []


class SyncChannelsRequest(BaseModel):
    """Input for SyncChannelsWorkflow."""

    chatwoot: ServiceConfig
    evolution: ServiceConfig
