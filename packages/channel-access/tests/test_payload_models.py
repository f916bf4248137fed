"""Tests for the raw payload models and their conversion to shared records."""

import pytest
from inbox_channel_access.models import ChatwootInbox, EvolutionInstance, N8nWebhookResponse
from pydantic import ValidationError


class TestEvolutionInstance:
    def test_aliases_map_to_record(self):
        instance = EvolutionInstance.model_validate(
            {
                "name": "vendas-sp",
                "connectionStatus": "open",
                "ownerJid": "5511999990001@s.whatsapp.net",
                "profileName": "Loja",
                "integration": "WHATSAPP-BAILEYS",
                "Chatwoot": {"enabled": True, "nameInbox": "Vendas SP"},
                "_count": {"Message": 7, "Contact": 2},
            }
        )
        record = instance.to_record()
        assert record.name == "vendas-sp"
        assert record.owner_identifier == "5511999990001@s.whatsapp.net"
        assert record.linked_channel_info is not None
        assert record.linked_channel_info.enabled
        assert record.linked_channel_name == "Vendas SP"
        assert record.message_count == 7
        assert record.contact_count == 2

    def test_minimal_instance(self):
        record = EvolutionInstance.model_validate({"name": "x"}).to_record()
        assert record.connection_status == ""
        assert record.linked_channel_info is None
        assert record.message_count == 0

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            EvolutionInstance.model_validate({"name": "", "connectionStatus": "open"})


class TestChatwootInbox:
    def test_account_fallback(self):
        record = ChatwootInbox.model_validate({"id": 4, "name": "Suporte"}).to_record(9)
        assert record.account_id == 9

    def test_echoed_account_wins(self):
        record = ChatwootInbox.model_validate(
            {"id": 4, "name": "Suporte", "account_id": 2}
        ).to_record(9)
        assert record.account_id == 2

    def test_missing_id_rejected(self):
        with pytest.raises(ValidationError):
            ChatwootInbox.model_validate({"name": "Suporte"})


class TestN8nWebhookResponse:
    def test_code_precedence(self):
        body = N8nWebhookResponse.model_validate({"base64": "B", "qrcode": "Q"})
        assert body.code() == "Q"

    def test_empty_strings_skipped(self):
        body = N8nWebhookResponse.model_validate({"qrcode": "", "n8n": {"base64": "N"}})
        assert body.code() == "N"

    def test_no_code(self):
        assert N8nWebhookResponse.model_validate({"msg": "hi", "extra": 1}).code() is None
