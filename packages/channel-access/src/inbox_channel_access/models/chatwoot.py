"""Typed models for Chatwoot inbox responses.

Only the fields the channel engine reads are modelled; Chatwoot sends many
more (avatar_url, working hours, widget colour, ...) which are ignored.
"""

from inbox_shared.channel_models import ChannelRecord
from pydantic import BaseModel, Field


class ChatwootInbox(BaseModel):
    """One element of GET /api/v1/accounts/{account_id}/inboxes."""

    id: int
    name: str = Field(min_length=1)
    channel_type: str = ""
    account_id: int | None = None

    def to_record(self, default_account_id: int) -> ChannelRecord:
        """Inbox payloads don't always echo the account — fall back to the scope we queried."""
        return ChannelRecord(
            id=self.id,
            name=self.name,
            channel_type=self.channel_type,
            account_id=self.account_id if self.account_id is not None else default_account_id,
        )
