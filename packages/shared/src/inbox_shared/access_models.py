"""Channel Access boundary models — the contract between Channel Manager and Channel Access.

These types cross the Temporal activity boundary. Workflows in the Channel
Manager create the requests; activities in Channel Access receive them and
return the results.

Design choices:
  - Every request carries the ServiceConfig it targets and no credential.
    Requests are persisted in Temporal event history, so the activity
    authenticates with the worker-side service credential named by
    ServiceConfig.auth_env_var. No request model has a token field.
  - Results extend PlatformResult. A failed read, an HTTP error, a timeout or
    a conflict is a result with success=False and an error_kind, never an
    exception.
"""

from __future__ import annotations

from pydantic import BaseModel

from inbox_shared.channel_models import ChannelRecord, InstanceRecord
from inbox_shared.models import PlatformResult
from inbox_shared.service_config import ServiceConfig

# ============================================================================
# Requests
# ============================================================================


class ListRequest(BaseModel):
    """Input for list_channels / list_instances."""

    config: ServiceConfig


class ChannelDraft(BaseModel):
    """Fields an operator fills in when creating or renaming a channel."""

    name: str
    channel_type: str = "evolution_api"
    platform_type: str = "digital_platform"  # digital_platform, maturation


class ChannelMutationRequest(BaseModel):
    """Input for create_channel / update_channel / delete_channel."""

    config: ServiceConfig
    channel_id: int | None = None
    draft: ChannelDraft | None = None


class InstanceActionRequest(BaseModel):
    """Input for request_pairing_code / delete_instance / logout_instance."""

    config: ServiceConfig
    instance_name: str
    timeout_seconds: float | None = None


class ProvisionRequest(BaseModel):
    """Input for provision_instance — create a channel and its gateway instance via n8n."""

    config: ServiceConfig
    draft: ChannelDraft
    timeout_seconds: float | None = None


# ============================================================================
# Results
# ============================================================================


class ServiceCheckResult(PlatformResult):
    """Returned by check_gateway — a lightweight connectivity check."""

    service_id: str = ""
    service_type: str = ""


class ChannelListResult(PlatformResult):
    """Returned by list_channels."""

    channels: list[ChannelRecord] = []
    record_count: int = 0
    rejected_count: int = 0


class InstanceListResult(PlatformResult):
    """Returned by list_instances."""

    instances: list[InstanceRecord] = []
    record_count: int = 0
    rejected_count: int = 0


class ChannelMutationResult(PlatformResult):
    """Returned by create/update/delete_channel. channel echoes the platform's record."""

    channel: ChannelRecord | None = None


class GatewayActionResult(PlatformResult):
    """Returned by delete_instance and logout_instance."""

    instance_name: str = ""
    action: str = ""  # delete, logout


class PairingResult(PlatformResult):
    """Returned by request_pairing_code.

    qr_code_base64 is an opaque base64 image payload, displayed as-is.
    """

    instance_name: str = ""
    qr_code_base64: str | None = None


class ProvisionResult(PlatformResult):
    """Returned by provision_instance."""

    channel_name: str = ""
    qr_code_base64: str | None = None
