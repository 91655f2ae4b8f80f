"""Schemas for identity-provider webhook events."""
from typing import Optional, List, Any

from pydantic import BaseModel, ConfigDict


class ClerkEmailAddress(BaseModel):
    """One address from a Clerk user payload."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    email_address: str


class ClerkUserData(BaseModel):
    """The `data` object of a Clerk `user.*` event."""
    model_config = ConfigDict(extra="ignore")

    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image_url: Optional[str] = None
    email_addresses: List[ClerkEmailAddress] = []

    @property
    def primary_email(self) -> Optional[str]:
        return self.email_addresses[0].email_address if self.email_addresses else None


class ClerkWebhookEvent(BaseModel):
    """Verified webhook envelope."""
    model_config = ConfigDict(extra="ignore")

    type: str
    data: dict[str, Any] = {}


class WebhookAck(BaseModel):
    """Acknowledgement returned to the webhook sender."""
    success: bool = True
