"""Evolution API connector — the WhatsApp gateway.

We read the list of gateway instances and, for maturation instances only,
delete or log them out. Pairing itself goes through the n8n webhook, not
through this connector.

Auth: `apikey` header carrying the gateway's global key (EVOLUTION_API_KEY).
The operator token is not forwarded: the gateway doesn't know our operators.
Base URL: http://<host>:8080/
"""

from __future__ import annotations

import logging

import httpx
from inbox_shared.access_models import (
    GatewayActionResult,
    InstanceListResult,
    ServiceCheckResult,
)
from inbox_shared.models import ErrorKind

from inbox_channel_access.connectors.base import BaseConnector
from inbox_channel_access.models.evolution import EvolutionInstance

logger = logging.getLogger(__name__)


class EvolutionConnector(BaseConnector):
    """Connector for the Evolution WhatsApp gateway API."""

    def _default_base_url(self) -> str:
        return "http://localhost:8080/"

    def _auth_headers(self, access_token: str) -> dict[str, str]:
        return {"apikey": self._resolve_credential()}

    async def _check_connection(self, client: httpx.AsyncClient) -> ServiceCheckResult:
        """Verify the API key by fetching the instance list."""
        response = await self._request(client, "GET", "instance/fetchInstances")
        data = response.json()
        instance_count = len(data) if isinstance(data, list) else 0
        return ServiceCheckResult(
            success=True,
            message=f"Connected to Evolution API — {instance_count} instances",
            service_id=self.config.service_id,
            service_type=self.config.service_type,
            data={"instance_count": instance_count},
        )

    async def list_instances(self, access_token: str = "") -> InstanceListResult:
        """Fetch every instance the gateway knows about.

        The endpoint returns a bare array; anything else is treated as empty.
        """
        try:
            client = await self._get_client()
            response = await self._request(
                client, "GET", "instance/fetchInstances", access_token
            )
            data = response.json()
            raw_items = data if isinstance(data, list) else []
            instances, rejected = self._validate_records(raw_items, EvolutionInstance)
            records = [instance.to_record() for instance in instances]
            return InstanceListResult(
                success=True,
                message=f"Fetched {len(records)} instances ({rejected} rejected)",
                instances=records,
                record_count=len(records),
                rejected_count=rejected,
            )
        except Exception as e:
            return InstanceListResult(
                success=False,
                message=f"Instance fetch failed: {e}",
                error_kind=ErrorKind.SOURCE_UNAVAILABLE,
            )

    async def delete_instance(self, access_token: str, instance_name: str) -> GatewayActionResult:
        """Delete an instance outright. Single attempt."""
        return await self._instance_action("delete", access_token, instance_name)

    async def logout_instance(self, access_token: str, instance_name: str) -> GatewayActionResult:
        """Unpair the phone from an instance but keep the instance itself."""
        return await self._instance_action("logout", access_token, instance_name)

    async def _instance_action(
        self, action: str, access_token: str, instance_name: str
    ) -> GatewayActionResult:
        if not instance_name.strip():
            return GatewayActionResult(
                success=False,
                message="Instance name is required",
                error_kind=ErrorKind.VALIDATION_ERROR,
                action=action,
            )
        try:
            client = await self._get_client()
            await self._request(
                client, "DELETE", f"instance/{action}/{instance_name}", access_token
            )
            logger.info(f"Evolution instance {action} succeeded: {instance_name}")
            return GatewayActionResult(
                success=True,
                message=f"Instance '{instance_name}' {action} succeeded",
                instance_name=instance_name,
                action=action,
            )
        except httpx.TimeoutException as e:
            logger.warning(f"Evolution instance {action} timed out for {instance_name}: {e}")
            return GatewayActionResult(
                success=False,
                message=f"Instance {action} timed out",
                error_kind=ErrorKind.TIMEOUT,
                instance_name=instance_name,
                action=action,
            )
        except Exception as e:
            logger.error(f"Evolution instance {action} failed for {instance_name}: {e}")
            return GatewayActionResult(
                success=False,
                message=f"Instance {action} failed: {e}",
                error_kind=ErrorKind.FAILED,
                instance_name=instance_name,
                action=action,
            )
