"""Connector factory — maps service_type strings to connector classes.

Adding a new external service:
  1. Create a new subclass of BaseConnector in this package
  2. Add one entry to _CONNECTOR_CLASSES below
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from inbox_channel_access.connectors.chatwoot import ChatwootConnector
from inbox_channel_access.connectors.evolution import EvolutionConnector
from inbox_channel_access.connectors.n8n import N8nWebhookConnector

if TYPE_CHECKING:
    from inbox_shared.service_config import ServiceConfig

    from inbox_channel_access.connectors.base import BaseConnector

_CONNECTOR_CLASSES: dict[str, type[BaseConnector]] = {
    "chatwoot": ChatwootConnector,
    "evolution": EvolutionConnector,
    "n8n": N8nWebhookConnector,
}


def get_connector(config: ServiceConfig) -> BaseConnector:
    """Instantiate the correct connector for the given service type."""
    cls = _CONNECTOR_CLASSES.get(config.service_type)
    if cls is None:
        supported = ", ".join(sorted(_CONNECTOR_CLASSES.keys()))
        raise ValueError(
            f"Unknown service_type '{config.service_type}'. Supported: {supported}"
        )
    return cls(config)
