"""Typed models for Evolution API (WhatsApp gateway) responses.

fetchInstances returns a bare JSON array. Field names are camelCase, the
Chatwoot link lives under a capitalised "Chatwoot" key, and message/contact
counters under "_count" — aliases map these onto snake_case fields.
"""

from datetime import datetime

from inbox_shared.channel_models import InstanceRecord, LinkedChannelInfo
from pydantic import BaseModel, ConfigDict, Field


class EvolutionChatwootLink(BaseModel):
    """The gateway's Chatwoot integration settings for one instance."""

    model_config = ConfigDict(populate_by_name=True)

    enabled: bool = False
    name_inbox: str | None = Field(default=None, alias="nameInbox")


class EvolutionCounts(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: int = Field(default=0, alias="Message")
    contact: int = Field(default=0, alias="Contact")
    chat: int = Field(default=0, alias="Chat")


class EvolutionInstance(BaseModel):
    """One element of GET /instance/fetchInstances."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    connection_status: str = Field(default="", alias="connectionStatus")
    owner_jid: str | None = Field(default=None, alias="ownerJid")
    profile_name: str | None = Field(default=None, alias="profileName")
    integration: str = ""
    chatwoot: EvolutionChatwootLink | None = Field(default=None, alias="Chatwoot")
    counts: EvolutionCounts = Field(default_factory=EvolutionCounts, alias="_count")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    def to_record(self) -> InstanceRecord:
        linked = None
        if self.chatwoot is not None:
            linked = LinkedChannelInfo(
                enabled=self.chatwoot.enabled,
                linked_channel_name=self.chatwoot.name_inbox,
            )
        return InstanceRecord(
            name=self.name,
            connection_status=self.connection_status,
            owner_identifier=self.owner_jid,
            profile_display_name=self.profile_name,
            integration_kind=self.integration,
            linked_channel_info=linked,
            message_count=self.counts.message,
            contact_count=self.counts.contact,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
