"""Typed models for n8n webhook responses.

The n8n workflows are maintained by hand and their response shapes drifted
over time. The QR code has been seen under "qrcode", "base64", "qrCode", and
nested as {"n8n": {"base64": ...}}. A rejected request carries a plain "msg".
"""

from pydantic import BaseModel, ConfigDict, Field


class N8nNestedPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    base64: str | None = None


class N8nWebhookResponse(BaseModel):
    """Response body of the get-qrcode and criainbox webhooks."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    qrcode: str | None = None
    base64: str | None = None
    qr_code: str | None = Field(default=None, alias="qrCode")
    msg: str | None = None
    n8n: N8nNestedPayload | None = None

    def code(self) -> str | None:
        """Return the first non-empty QR payload in precedence order."""
        nested = self.n8n.base64 if self.n8n is not None else None
        for candidate in (self.qrcode, self.base64, self.qr_code, nested):
            if candidate:
                return candidate
        return None
