"""Integration tests — run against real services with real credentials.

These tests are SKIPPED unless the corresponding environment variables are
set. They only read: nothing here creates, pairs or deletes anything.

Run with: pytest packages/channel-access/tests/test_live_services.py -v
"""

import os

import pytest
from inbox_channel_access.connectors import get_connector
from inbox_shared.service_config import load_service_configs

requires_chatwoot = pytest.mark.skipif(
    not (os.environ.get("CHATWOOT_API_TOKEN") and os.environ.get("CHATWOOT_ACCOUNT_ID")),
    reason="CHATWOOT_API_TOKEN / CHATWOOT_ACCOUNT_ID not set",
)
requires_evolution = pytest.mark.skipif(
    not (os.environ.get("EVOLUTION_API_KEY") and os.environ.get("CHATWOOT_ACCOUNT_ID")),
    reason="EVOLUTION_API_KEY / CHATWOOT_ACCOUNT_ID not set",
)


@requires_chatwoot
class TestChatwootIntegration:
    async def test_list_channels(self):
        connector = get_connector(load_service_configs().chatwoot)
        try:
            result = await connector.list_channels()
            assert result.success, f"List failed: {result.message}"
        finally:
            await connector.close()


@requires_evolution
class TestEvolutionIntegration:
    async def test_list_instances(self):
        connector = get_connector(load_service_configs().evolution)
        try:
            result = await connector.list_instances()
            assert result.success, f"List failed: {result.message}"
            assert result.rejected_count == 0
        finally:
            await connector.close()
