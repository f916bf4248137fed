"""Shared test fixtures for Channel Access tests.

Provides:
  - JSON fixture loading
  - Mock HTTP transport for httpx (intercepts all requests)
  - Pre-built ServiceConfig instances for each connector type
  - Environment variable setup for credential resolution
"""

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import httpx
import pytest
from inbox_shared.service_config import ServiceConfig

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class MockTransport(httpx.AsyncBaseTransport):
    """Mock HTTP transport that returns preconfigured responses.

    Each call to handle_async_request pops the next entry from the list. An
    entry that is an exception instance is raised instead of returned. If the
    list is exhausted, returns a 500 error.
    """

    def __init__(self, responses: list[httpx.Response | Exception] | None = None) -> None:
        self.responses = list(responses or [])
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            response.stream = httpx.ByteStream(response.content)
            return response
        return httpx.Response(500, json={"error": "No more mock responses"})


@pytest.fixture
def load_fixture():
    """Load a JSON fixture file by name."""

    def _load(name: str) -> Any:
        return json.loads((FIXTURES_DIR / name).read_text())

    return _load


@pytest.fixture
def mock_transport():
    """Build a MockTransport and wire it into a connector's HTTP client."""

    def _attach(connector, responses: list[httpx.Response | Exception]) -> MockTransport:
        transport = MockTransport(responses)
        connector._client = httpx.AsyncClient(
            transport=transport, base_url=connector._get_base_url()
        )
        return transport

    return _attach


@pytest.fixture
def mock_env():
    """Set fake service credentials in environment variables."""
    env = {
        "CHATWOOT_API_TOKEN": "test-chatwoot-token",
        "EVOLUTION_API_KEY": "test-evolution-key",
    }
    with patch.dict("os.environ", env):
        yield env


@pytest.fixture
def chatwoot_config() -> ServiceConfig:
    return ServiceConfig(
        service_id="test-chatwoot",
        service_type="chatwoot",
        base_url="https://chat.example.com/",
        auth_env_var="CHATWOOT_API_TOKEN",
        account_id=3,
    )


@pytest.fixture
def evolution_config() -> ServiceConfig:
    return ServiceConfig(
        service_id="test-evolution",
        service_type="evolution",
        base_url="https://gw.example.com/",
        auth_env_var="EVOLUTION_API_KEY",
    )


@pytest.fixture
def n8n_config() -> ServiceConfig:
    return ServiceConfig(
        service_id="test-n8n",
        service_type="n8n",
        base_url="https://n8n.example.com/",
    )
