"""n8n connector — the workflow-automation webhooks that drive WhatsApp pairing.

Two webhooks are used:

  get-qrcode  {"instanceName": ...}  → a fresh pairing QR for an existing instance
  criainbox   {"inboxName", "channelType", "platformType", "authToken", "timestamp"}
              → provisions a new gateway instance + Chatwoot inbox, answers with a QR

Both answer HTTP 200 with {"msg": "Essa instancia ja existe!"} when the
instance name is already registered. That is an operator ordering mistake,
reported as conflicting_identity rather than a generic failure.

Auth: the webhooks are unauthenticated by default. A token (the caller's, or
the worker's own from auth_env_var when set) is forwarded as a Bearer header
so a secured n8n can check it.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import httpx
from inbox_shared.access_models import (
    ChannelDraft,
    PairingResult,
    ProvisionResult,
    ServiceCheckResult,
)
from inbox_shared.models import ErrorKind
from pydantic import ValidationError

from inbox_channel_access.connectors.base import BaseConnector
from inbox_channel_access.models.n8n import N8nWebhookResponse

logger = logging.getLogger(__name__)


class N8nWebhookConnector(BaseConnector):
    """Connector for the n8n pairing and provisioning webhooks."""

    def _default_base_url(self) -> str:
        return "http://localhost:5678/"

    def _auth_headers(self, access_token: str) -> dict[str, str]:
        token = access_token or self._optional_credential()
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    async def _check_connection(self, client: httpx.AsyncClient) -> ServiceCheckResult:
        """n8n exposes /healthz on the same port as its webhooks."""
        await self._request(client, "GET", "healthz")
        return ServiceCheckResult(
            success=True,
            message="Connected to n8n",
            service_id=self.config.service_id,
            service_type=self.config.service_type,
        )

    def _is_conflict(self, body: N8nWebhookResponse) -> bool:
        return bool(body.msg) and body.msg.strip() == self.config.conflict_marker

    async def _post_webhook(
        self,
        webhook: str,
        payload: dict[str, str],
        access_token: str,
        timeout: float | None,
    ) -> N8nWebhookResponse:
        client = await self._get_client()
        response = await self._request(
            client,
            "POST",
            f"webhook/{webhook}",
            access_token,
            json=payload,
            timeout=timeout if timeout is not None else self.config.timeout_seconds,
        )
        data = response.json()
        # "Respond to Webhook" nodes set to "all items" wrap the body in a list.
        if isinstance(data, list):
            data = data[0] if data else {}
        return N8nWebhookResponse.model_validate(data)

    async def request_pairing_code(
        self,
        access_token: str,
        instance_name: str,
        timeout: float | None = None,
    ) -> PairingResult:
        """Ask n8n for a pairing QR code for an existing gateway instance."""
        if not instance_name.strip():
            return PairingResult(
                success=False,
                message="Instance name is required",
                error_kind=ErrorKind.VALIDATION_ERROR,
            )
        try:
            body = await self._post_webhook(
                self.config.pairing_webhook,
                {"instanceName": instance_name},
                access_token,
                timeout,
            )
        except httpx.TimeoutException:
            return PairingResult(
                success=False,
                message=f"Pairing webhook did not answer within {timeout or self.config.timeout_seconds}s",
                error_kind=ErrorKind.TIMEOUT,
                instance_name=instance_name,
            )
        except httpx.HTTPStatusError as e:
            return PairingResult(
                success=False,
                message=f"Pairing webhook error: {e.response.status_code} {e.response.reason_phrase}",
                error_kind=ErrorKind.FAILED,
                instance_name=instance_name,
            )
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            return PairingResult(
                success=False,
                message=f"Pairing request failed: {e}",
                error_kind=ErrorKind.FAILED,
                instance_name=instance_name,
            )

        if self._is_conflict(body):
            return PairingResult(
                success=False,
                message=body.msg or "Instance already exists",
                error_kind=ErrorKind.CONFLICTING_IDENTITY,
                instance_name=instance_name,
            )
        code = body.code()
        if not code:
            return PairingResult(
                success=False,
                message="Pairing webhook answered without a QR code",
                error_kind=ErrorKind.FAILED,
                instance_name=instance_name,
            )
        return PairingResult(
            success=True,
            message="QR code issued",
            instance_name=instance_name,
            qr_code_base64=code,
        )

    async def provision_instance(
        self,
        access_token: str,
        draft: ChannelDraft,
        timeout: float | None = None,
    ) -> ProvisionResult:
        """Create a gateway instance and its Chatwoot inbox in one n8n run.

        A success without a QR code is still a success: n8n created the inbox
        and the operator can pair later through request_pairing_code.
        """
        name = draft.name.strip()
        if not name:
            return ProvisionResult(
                success=False,
                message="Channel name is required",
                error_kind=ErrorKind.VALIDATION_ERROR,
            )
        payload = {
            "inboxName": name,
            "channelType": draft.channel_type,
            "platformType": draft.platform_type,
            "authToken": access_token or self._optional_credential(),
            "timestamp": datetime.now(UTC).isoformat(),
        }
        try:
            body = await self._post_webhook(
                self.config.provision_webhook, payload, access_token, timeout
            )
        except httpx.TimeoutException:
            return ProvisionResult(
                success=False,
                message="Provisioning webhook timed out",
                error_kind=ErrorKind.TIMEOUT,
                channel_name=name,
            )
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            return ProvisionResult(
                success=False,
                message=f"Provisioning failed: {e}",
                error_kind=ErrorKind.FAILED,
                channel_name=name,
            )

        if self._is_conflict(body):
            return ProvisionResult(
                success=False,
                message=body.msg or "Instance already exists",
                error_kind=ErrorKind.CONFLICTING_IDENTITY,
                channel_name=name,
            )
        code = body.code()
        logger.info(f"Provisioned channel '{name}' via n8n (qr_code={'yes' if code else 'no'})")
        return ProvisionResult(
            success=True,
            message="Instance created with QR code" if code else "Provisioning workflow ran",
            channel_name=name,
            qr_code_base64=code,
        )
