"""Typed Pydantic models for each connector's raw API responses.

These are internal to channel-access. Connectors validate every raw element
against them and convert the survivors into the shared ChannelRecord and
InstanceRecord types, so nothing untyped crosses the activity boundary.
"""

from inbox_channel_access.models.chatwoot import ChatwootInbox
from inbox_channel_access.models.evolution import (
    EvolutionChatwootLink,
    EvolutionCounts,
    EvolutionInstance,
)
from inbox_channel_access.models.n8n import N8nNestedPayload, N8nWebhookResponse

__all__ = [
    "ChatwootInbox",
    "EvolutionChatwootLink",
    "EvolutionCounts",
    "EvolutionInstance",
    "N8nNestedPayload",
    "N8nWebhookResponse",
]
