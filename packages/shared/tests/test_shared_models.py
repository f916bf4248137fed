"""Tests for the shared channel models and service configuration."""

from unittest.mock import patch

import pytest
from inbox_shared.access_models import (
    ChannelMutationRequest,
    InstanceActionRequest,
    ListRequest,
    ProvisionRequest,
)
from inbox_shared.channel_models import (
    ConnectionStatus,
    GatewayDetail,
    InstanceRecord,
    PlatformCategory,
    ReconciledItem,
    SyncChannelsRequest,
)
from inbox_shared.connection_models import ConnectChannelRequest, DeleteInstanceRequest
from inbox_shared.service_config import DEFAULT_CONFLICT_MARKER, load_service_configs


class TestConnectionStatus:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("open", ConnectionStatus.OPEN),
            (" OPEN ", ConnectionStatus.OPEN),
            ("connecting", ConnectionStatus.CONNECTING),
            ("close", ConnectionStatus.CLOSE),
            ("refused", ConnectionStatus.UNKNOWN),
            ("", ConnectionStatus.UNKNOWN),
            (None, ConnectionStatus.UNKNOWN),
        ],
    )
    def test_from_gateway(self, raw, expected):
        assert ConnectionStatus.from_gateway(raw) == expected


class TestInstanceRecord:
    def test_phone_number_strips_jid_suffix(self):
        record = InstanceRecord(name="a", owner_identifier="5511999990001@s.whatsapp.net")
        assert record.phone_number == "5511999990001"

    def test_phone_number_absent(self):
        assert InstanceRecord(name="a").phone_number is None

    def test_linked_channel_name_absent(self):
        assert InstanceRecord(name="a").linked_channel_name is None


class TestReconciledItem:
    def test_channel_origin_item_is_editable_not_deletable(self):
        item = ReconciledItem(
            identity_key=4,
            display_name="Vendas",
            channel_type="api",
            platform_category=PlatformCategory.DIGITAL_PLATFORM,
            gateway_detail=GatewayDetail(instance_name="vendas"),
        )
        assert item.can_edit_on_platform
        assert not item.can_delete_on_gateway

    def test_maturation_item_is_deletable_not_editable(self):
        item = ReconciledItem(
            identity_key=-1,
            display_name="aquecimento01",
            channel_type="evolution_api",
            platform_category=PlatformCategory.MATURATION,
            gateway_origin=True,
            gateway_detail=GatewayDetail(instance_name="aquecimento01"),
        )
        assert not item.can_edit_on_platform
        assert item.can_delete_on_gateway


class TestLoadServiceConfigs:
    def test_loads_from_environment(self):
        env = {
            "CHATWOOT_ACCOUNT_ID": "3",
            "CHATWOOT_BASE_URL": "https://chat.example.com/",
            "EVOLUTION_API_URL": "https://gw.example.com/",
            "N8N_BASE_URL": "https://n8n.example.com/",
            "PAIRING_TIMEOUT_SECONDS": "20",
        }
        with patch.dict("os.environ", env, clear=True):
            configs = load_service_configs()

        assert configs.chatwoot.account_id == 3
        assert configs.chatwoot.auth_env_var == "CHATWOOT_API_TOKEN"
        assert configs.evolution.base_url == "https://gw.example.com/"
        assert configs.evolution.auth_env_var == "EVOLUTION_API_KEY"
        assert configs.n8n.pairing_webhook == "get-qrcode"
        assert configs.n8n.auth_env_var == "N8N_WEBHOOK_TOKEN"
        assert configs.n8n.conflict_marker == DEFAULT_CONFLICT_MARKER
        assert configs.pairing_timeout_seconds == 20.0

    def test_unset_urls_fall_back_to_none(self):
        with patch.dict("os.environ", {"CHATWOOT_ACCOUNT_ID": "3"}, clear=True):
            configs = load_service_configs()
        assert configs.chatwoot.base_url is None
        assert configs.pairing_timeout_seconds == 15.0

    @pytest.mark.parametrize("value", ["", "abc"])
    def test_account_id_required(self, value):
        with patch.dict("os.environ", {"CHATWOOT_ACCOUNT_ID": value}, clear=True):
            with pytest.raises(ValueError, match="CHATWOOT_ACCOUNT_ID"):
                load_service_configs()


@pytest.mark.parametrize(
    "model",
    [
        ListRequest,
        ChannelMutationRequest,
        InstanceActionRequest,
        ProvisionRequest,
        SyncChannelsRequest,
        ConnectChannelRequest,
        DeleteInstanceRequest,
    ],
)
def test_workflow_inputs_have_no_credential_fields(model):
    """These models land in Temporal event history."""
    assert not [name for name in model.model_fields if "token" in name or "secret" in name]
