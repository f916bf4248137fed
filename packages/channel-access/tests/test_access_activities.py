"""Tests for Channel Access Temporal activity functions.

These test the activity layer, the bridge between Temporal workflows and
connectors. Connectors are mocked to isolate the activity logic:
  - Connector lifecycle (create, delegate, close)
  - Request validation before any connector is built
  - Service-type mismatches
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from inbox_channel_access.activities import (
    check_gateway,
    create_channel,
    delete_instance,
    list_channels,
    list_instances,
    request_pairing_code,
    update_channel,
)
from inbox_channel_access.connectors.chatwoot import ChatwootConnector
from inbox_channel_access.connectors.evolution import EvolutionConnector
from inbox_channel_access.connectors.n8n import N8nWebhookConnector
from inbox_shared.access_models import (
    ChannelDraft,
    ChannelListResult,
    ChannelMutationRequest,
    GatewayActionResult,
    InstanceActionRequest,
    InstanceListResult,
    ListRequest,
    PairingResult,
    ServiceCheckResult,
)
from inbox_shared.channel_models import ChannelRecord
from inbox_shared.models import ErrorKind


@pytest.fixture
def chatwoot_connector():
    connector = AsyncMock(spec=ChatwootConnector)
    connector.list_channels = AsyncMock(
        return_value=ChannelListResult(
            success=True,
            message="Fetched 1 channels (0 rejected)",
            channels=[ChannelRecord(id=1, name="Vendas", account_id=3)],
            record_count=1,
        )
    )
    connector.close = AsyncMock()
    return connector


@pytest.fixture
def evolution_connector():
    connector = AsyncMock(spec=EvolutionConnector)
    connector.list_instances = AsyncMock(
        return_value=InstanceListResult(success=True, message="Fetched 0 instances")
    )
    connector.delete_instance = AsyncMock(
        return_value=GatewayActionResult(
            success=True, message="ok", instance_name="aquecimento01", action="delete"
        )
    )
    connector.close = AsyncMock()
    return connector


class TestListActivities:
    @patch("inbox_channel_access.activities.get_connector")
    async def test_list_channels(self, mock_factory, chatwoot_connector, chatwoot_config):
        mock_factory.return_value = chatwoot_connector

        result = await list_channels(ListRequest(config=chatwoot_config))
        assert result.success
        assert result.record_count == 1
        chatwoot_connector.list_channels.assert_awaited_once_with("")
        chatwoot_connector.close.assert_called_once()

    @patch("inbox_channel_access.activities.get_connector")
    async def test_list_always_closes(self, mock_factory, evolution_config):
        """Connector is closed even if the call raises."""
        connector = AsyncMock(spec=EvolutionConnector)
        connector.list_instances = AsyncMock(side_effect=RuntimeError("boom"))
        connector.close = AsyncMock()
        mock_factory.return_value = connector

        with pytest.raises(RuntimeError, match="boom"):
            await list_instances(ListRequest(config=evolution_config))
        connector.close.assert_called_once()

    @patch("inbox_channel_access.activities.get_connector")
    async def test_wrong_service_type_raises(
        self, mock_factory, evolution_connector, evolution_config
    ):
        mock_factory.return_value = evolution_connector

        with pytest.raises(ValueError, match="expected ChatwootConnector"):
            await list_channels(ListRequest(config=evolution_config))


class TestChannelMutationActivities:
    @patch("inbox_channel_access.activities.get_connector")
    async def test_create_without_draft_is_rejected(self, mock_factory, chatwoot_config):
        result = await create_channel(ChannelMutationRequest(config=chatwoot_config))
        assert not result.success
        assert result.error_kind == ErrorKind.VALIDATION_ERROR
        mock_factory.assert_not_called()

    @patch("inbox_channel_access.activities.get_connector")
    async def test_update_without_id_is_rejected(self, mock_factory, chatwoot_config):
        result = await update_channel(
            ChannelMutationRequest(config=chatwoot_config, draft=ChannelDraft(name="x"))
        )
        assert result.error_kind == ErrorKind.VALIDATION_ERROR
        mock_factory.assert_not_called()


class TestInstanceActivities:
    @patch("inbox_channel_access.activities.get_connector")
    async def test_request_pairing_code(self, mock_factory, n8n_config):
        connector = AsyncMock(spec=N8nWebhookConnector)
        connector.request_pairing_code = AsyncMock(
            return_value=PairingResult(
                success=True, message="QR code issued", qr_code_base64="QR"
            )
        )
        connector.close = AsyncMock()
        mock_factory.return_value = connector

        result = await request_pairing_code(
            InstanceActionRequest(
                config=n8n_config, instance_name="vendas-sp", timeout_seconds=15.0
            )
        )
        assert result.qr_code_base64 == "QR"
        connector.request_pairing_code.assert_awaited_once_with("", "vendas-sp", 15.0)
        connector.close.assert_called_once()

    @patch("inbox_channel_access.activities.get_connector")
    async def test_delete_instance(self, mock_factory, evolution_connector, evolution_config):
        mock_factory.return_value = evolution_connector

        result = await delete_instance(
            InstanceActionRequest(config=evolution_config, instance_name="aquecimento01")
        )
        assert result.success
        evolution_connector.delete_instance.assert_awaited_once_with("", "aquecimento01")
        evolution_connector.close.assert_called_once()

    @patch("inbox_channel_access.activities.get_connector")
    async def test_check_gateway_accepts_any_service(self, mock_factory, n8n_config):
        connector = AsyncMock()
        connector.check_connection = AsyncMock(
            return_value=ServiceCheckResult(success=True, message="Connected to n8n")
        )
        connector.close = AsyncMock()
        mock_factory.return_value = connector

        result = await check_gateway(n8n_config)
        assert result.success
        connector.close.assert_called_once()


class TestWorkerCredentials:
    """Requests are persisted in workflow history, so they never carry a token."""

    def test_list_request_serializes_without_token(self, chatwoot_config):
        payload = ListRequest(config=chatwoot_config).model_dump_json()
        assert "token" not in payload
        assert "test-chatwoot-token" not in payload

    @patch("inbox_channel_access.activities.get_connector")
    async def test_list_channels_authenticates_from_worker_env(
        self, mock_factory, chatwoot_config, mock_env, mock_transport
    ):
        connector = ChatwootConnector(chatwoot_config)
        transport = mock_transport(connector, [httpx.Response(200, json={"payload": []})])
        mock_factory.return_value = connector

        result = await list_channels(ListRequest(config=chatwoot_config))
        assert result.success
        assert transport.requests[0].headers["api_access_token"] == "test-chatwoot-token"
