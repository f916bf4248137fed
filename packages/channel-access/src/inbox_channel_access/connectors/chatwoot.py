"""Chatwoot connector — the conversation platform's inbox (channel) API.

Every endpoint is scoped to one account: /api/v1/accounts/{account_id}/...
The operator's own token goes in the `api_access_token` header (NOT Bearer).
When the caller passes no token (always the case under the Temporal
activities), the service token named by auth_env_var is used instead.

Response shape drift: GET inboxes has returned {"payload": [...]},
{"data": [...]} and a bare array depending on the Chatwoot version.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from inbox_shared.access_models import (
    ChannelDraft,
    ChannelListResult,
    ChannelMutationResult,
    ServiceCheckResult,
)
from inbox_shared.models import ErrorKind

from inbox_channel_access.connectors.base import BaseConnector
from inbox_channel_access.models.chatwoot import ChatwootInbox

logger = logging.getLogger(__name__)


class ChatwootConnector(BaseConnector):
    """Connector for the Chatwoot account inbox API."""

    def _default_base_url(self) -> str:
        return "https://app.chatwoot.com/"

    def _auth_headers(self, access_token: str) -> dict[str, str]:
        return {"api_access_token": access_token or self._resolve_credential()}

    def _account_id(self) -> int:
        if self.config.account_id is None:
            raise ValueError(f"No account_id configured for service '{self.config.service_id}'")
        return self.config.account_id

    def _inboxes_path(self, channel_id: int | None = None) -> str:
        path = f"api/v1/accounts/{self._account_id()}/inboxes"
        if channel_id is not None:
            path = f"{path}/{channel_id}"
        return path

    @staticmethod
    def _extract_items(data: Any) -> list[Any]:
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            for key in ("payload", "data"):
                items = data.get(key)
                if isinstance(items, list):
                    return items
        return []

    async def _check_connection(self, client: httpx.AsyncClient) -> ServiceCheckResult:
        """Verify credentials by listing the account's inboxes."""
        response = await self._request(client, "GET", self._inboxes_path())
        inbox_count = len(self._extract_items(response.json()))
        return ServiceCheckResult(
            success=True,
            message=f"Connected to Chatwoot — {inbox_count} inboxes in account {self._account_id()}",
            service_id=self.config.service_id,
            service_type=self.config.service_type,
            data={"inbox_count": inbox_count},
        )

    async def list_channels(self, access_token: str = "") -> ChannelListResult:
        """Fetch every inbox registered in the account."""
        try:
            client = await self._get_client()
            response = await self._request(client, "GET", self._inboxes_path(), access_token)
            inboxes, rejected = self._validate_records(
                self._extract_items(response.json()), ChatwootInbox
            )
            channels = [inbox.to_record(self._account_id()) for inbox in inboxes]
            return ChannelListResult(
                success=True,
                message=f"Fetched {len(channels)} channels ({rejected} rejected)",
                channels=channels,
                record_count=len(channels),
                rejected_count=rejected,
            )
        except Exception as e:
            return ChannelListResult(
                success=False,
                message=f"Channel fetch failed: {e}",
                error_kind=ErrorKind.SOURCE_UNAVAILABLE,
            )

    async def create_channel(
        self, access_token: str, draft: ChannelDraft
    ) -> ChannelMutationResult:
        """Register a new inbox. Blank names are rejected before any network call."""
        invalid = self._validate_draft(draft)
        if invalid is not None:
            return invalid
        return await self._mutate(
            "POST",
            self._inboxes_path(),
            access_token,
            json={"name": draft.name.strip(), "channel_type": draft.channel_type},
            verb="create",
        )

    async def update_channel(
        self, access_token: str, channel_id: int, draft: ChannelDraft
    ) -> ChannelMutationResult:
        """Rename an inbox or change its channel type."""
        invalid = self._validate_draft(draft)
        if invalid is not None:
            return invalid
        return await self._mutate(
            "PUT",
            self._inboxes_path(channel_id),
            access_token,
            json={"name": draft.name.strip(), "channel_type": draft.channel_type},
            verb="update",
        )

    async def delete_channel(self, access_token: str, channel_id: int) -> ChannelMutationResult:
        """Delete an inbox. The gateway instance behind it, if any, is left alone."""
        return await self._mutate(
            "DELETE", self._inboxes_path(channel_id), access_token, verb="delete"
        )

    @staticmethod
    def _validate_draft(draft: ChannelDraft) -> ChannelMutationResult | None:
        if not draft.name.strip():
            return ChannelMutationResult(
                success=False,
                message="Channel name is required",
                error_kind=ErrorKind.VALIDATION_ERROR,
            )
        return None

    async def _mutate(
        self,
        method: str,
        path: str,
        access_token: str,
        *,
        verb: str,
        **kwargs: Any,
    ) -> ChannelMutationResult:
        try:
            client = await self._get_client()
            response = await self._request(client, method, path, access_token, **kwargs)
            channel = None
            if method != "DELETE" and response.content:
                inboxes, _ = self._validate_records([response.json()], ChatwootInbox)
                if inboxes:
                    channel = inboxes[0].to_record(self._account_id())
            logger.info(f"Chatwoot channel {verb} succeeded: {path}")
            return ChannelMutationResult(
                success=True,
                message=f"Channel {verb} succeeded",
                channel=channel,
            )
        except Exception as e:
            logger.error(f"Chatwoot channel {verb} failed for {path}: {e}")
            return ChannelMutationResult(
                success=False,
                message=f"Channel {verb} failed: {e}",
                error_kind=ErrorKind.FAILED,
            )
