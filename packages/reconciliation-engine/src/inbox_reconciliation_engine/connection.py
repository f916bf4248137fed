"""Connection workflow — pairing (QR code) and maturation deletion for reconciled items.

Pairing:   idle → requesting → awaiting_scan | failed | timed_out
Deletion:  idle → deleting → deleted | failed

The engine stops at awaiting_scan. It hands the QR payload to the caller and
does not poll; a later reconciliation pass is what observes the gateway
reporting "open". Nothing here claims a connection it hasn't seen.

Rules:
  - Pairing is keyed by the gateway's own instance name, never by the platform
    display name (the two drift apart, see matcher.py).
  - One outbound request per call, bounded by the caller's timeout, no retries.
  - At most one request in flight per instance name. A second call while the
    first is pending is refused with error_kind=in_flight: a duplicate pairing
    request against the same instance only confuses the gateway.
  - Deletion is only legal for maturation items. A digital_platform item has
    a Chatwoot channel behind it that deleting the instance would orphan.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from inbox_shared.access_models import GatewayActionResult, PairingResult
from inbox_shared.channel_models import (
    ConnectionStatus,
    GatewayDetail,
    PlatformCategory,
    ReconciledItem,
)
from inbox_shared.connection_models import (
    ConnectionOutcome,
    ConnectionState,
    DeletionOutcome,
)
from inbox_shared.models import ErrorKind, PreconditionViolation
from inbox_shared.service_config import DEFAULT_PAIRING_TIMEOUT_SECONDS

from inbox_reconciliation_engine.normalize import normalize_name

logger = logging.getLogger(__name__)


class PairingWebhook(Protocol):
    async def request_pairing_code(
        self, access_token: str, instance_name: str, timeout: float | None = None
    ) -> PairingResult: ...


class InstanceGateway(Protocol):
    async def delete_instance(
        self, access_token: str, instance_name: str
    ) -> GatewayActionResult: ...


def initial_state(item: ReconciledItem) -> ConnectionState:
    """An open item is already linked; anything else starts idle."""
    if item.connection_status == ConnectionStatus.OPEN:
        return ConnectionState.LINKED
    return ConnectionState.IDLE


def require_gateway_detail(item: ReconciledItem) -> GatewayDetail:
    if item.gateway_detail is None:
        raise PreconditionViolation(
            f"Item {item.identity_key} ('{item.display_name}') has no gateway instance to pair"
        )
    return item.gateway_detail


def require_maturation(item: ReconciledItem) -> GatewayDetail:
    if not item.can_delete_on_gateway:
        raise PreconditionViolation(
            f"Item {item.identity_key} ('{item.display_name}') is "
            f"{item.platform_category}; only maturation instances can be deleted"
        )
    return require_gateway_detail(item)


def outcome_from_pairing(item: ReconciledItem, result: PairingResult) -> ConnectionOutcome:
    """Map a webhook answer onto the pairing state machine."""
    detail = require_gateway_detail(item)
    common = {
        "identity_key": item.identity_key,
        "instance_name": detail.instance_name,
        "item_status": item.connection_status,
    }
    if result.success and result.qr_code_base64:
        return ConnectionOutcome(
            success=True,
            message=result.message,
            state=ConnectionState.AWAITING_SCAN,
            qr_code_base64=result.qr_code_base64,
            **common,
        )
    if result.error_kind == ErrorKind.TIMEOUT:
        return ConnectionOutcome(
            success=False,
            message=result.message,
            error_kind=ErrorKind.TIMEOUT,
            state=ConnectionState.TIMED_OUT,
            **common,
        )
    return ConnectionOutcome(
        success=False,
        message=result.message,
        error_kind=result.error_kind or ErrorKind.FAILED,
        state=ConnectionState.FAILED,
        **common,
    )


def outcome_from_deletion(item: ReconciledItem, result: GatewayActionResult) -> DeletionOutcome:
    """Map a gateway delete answer onto the deletion state machine."""
    detail = require_gateway_detail(item)
    if result.success:
        return DeletionOutcome(
            success=True,
            message=result.message,
            identity_key=item.identity_key,
            instance_name=detail.instance_name,
            state=ConnectionState.DELETED,
        )
    return DeletionOutcome(
        success=False,
        message=result.message,
        error_kind=result.error_kind or ErrorKind.FAILED,
        identity_key=item.identity_key,
        instance_name=detail.instance_name,
        state=ConnectionState.FAILED,
    )


class ConnectionWorkflow:
    """Drives pairing and maturation deletion against the webhook and the gateway.

    Holds no state between calls except the set of instance names with a
    request currently in flight.
    """

    def __init__(
        self,
        webhook: PairingWebhook,
        gateway: InstanceGateway,
        timeout: float = DEFAULT_PAIRING_TIMEOUT_SECONDS,
    ) -> None:
        self.webhook = webhook
        self.gateway = gateway
        self.timeout = timeout
        self._in_flight: set[str] = set()

    @staticmethod
    def _flight_key(instance_name: str) -> str:
        return normalize_name(instance_name) or instance_name

    def is_in_flight(self, instance_name: str) -> bool:
        return self._flight_key(instance_name) in self._in_flight

    async def request_connection(
        self,
        item: ReconciledItem,
        access_token: str = "",
        timeout: float | None = None,
    ) -> ConnectionOutcome:
        """Request a pairing QR code for the item's gateway instance.

        Raises PreconditionViolation if the item has no gateway detail; every
        other failure comes back as a ConnectionOutcome.
        """
        detail = require_gateway_detail(item)
        name = detail.instance_name
        budget = timeout if timeout is not None else self.timeout
        key = self._flight_key(name)

        if key in self._in_flight:
            logger.info(f"Pairing for '{name}' already in flight; refusing duplicate request")
            return ConnectionOutcome(
                success=False,
                message=f"A pairing request for '{name}' is already in progress",
                error_kind=ErrorKind.IN_FLIGHT,
                identity_key=item.identity_key,
                instance_name=name,
                state=ConnectionState.FAILED,
                item_status=item.connection_status,
            )

        self._in_flight.add(key)
        logger.info(f"Pairing '{name}': {initial_state(item)} → {ConnectionState.REQUESTING}")
        try:
            result = await asyncio.wait_for(
                self.webhook.request_pairing_code(access_token, name, budget),
                timeout=budget,
            )
        except TimeoutError:
            result = PairingResult(
                success=False,
                message=f"No answer from the pairing webhook within {budget}s",
                error_kind=ErrorKind.TIMEOUT,
                instance_name=name,
            )
        finally:
            self._in_flight.discard(key)

        outcome = outcome_from_pairing(item, result)
        if outcome.state == ConnectionState.TIMED_OUT:
            logger.warning(f"Pairing '{name}' timed out after {budget}s")
        elif outcome.error_kind == ErrorKind.CONFLICTING_IDENTITY:
            logger.warning(f"Pairing '{name}' rejected, identity conflict: {outcome.message}")
        elif outcome.state == ConnectionState.FAILED:
            logger.error(f"Pairing '{name}' failed: {outcome.message}")
        else:
            logger.info(f"Pairing '{name}': {ConnectionState.REQUESTING} → {outcome.state}")
        return outcome

    async def delete_maturation_instance(
        self,
        item: ReconciledItem,
        access_token: str = "",
        timeout: float | None = None,
    ) -> DeletionOutcome:
        """Delete a gateway-only instance. Single attempt, failure is reported."""
        detail = require_maturation(item)
        name = detail.instance_name
        budget = timeout if timeout is not None else self.timeout
        key = self._flight_key(name)

        if key in self._in_flight:
            return DeletionOutcome(
                success=False,
                message=f"Another request for '{name}' is already in progress",
                error_kind=ErrorKind.IN_FLIGHT,
                identity_key=item.identity_key,
                instance_name=name,
                state=ConnectionState.FAILED,
            )

        self._in_flight.add(key)
        logger.info(f"Deleting maturation instance '{name}': {ConnectionState.DELETING}")
        try:
            result = await asyncio.wait_for(
                self.gateway.delete_instance(access_token, name),
                timeout=budget,
            )
        except TimeoutError:
            logger.warning(f"Deleting '{name}' timed out after {budget}s")
            result = GatewayActionResult(
                success=False,
                message=f"No answer from the gateway within {budget}s",
                error_kind=ErrorKind.TIMEOUT,
                instance_name=name,
                action="delete",
            )
        finally:
            self._in_flight.discard(key)

        outcome = outcome_from_deletion(item, result)
        if outcome.success:
            logger.info(f"Deleted maturation instance '{name}'")
        else:
            logger.error(f"Deleting maturation instance '{name}' failed: {outcome.message}")
        return outcome
