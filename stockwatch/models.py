"""Data models for the stock watcher."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from stockwatch import config


class TwilioCredentials(BaseModel):
    """Twilio account used to send the SMS alerts."""

    model_config = ConfigDict(extra="allow")

    sid: str = Field("", description="Twilio account SID")
    token: str = Field("", description="Twilio auth token")
    number: str = Field("", description="Twilio phone number to send from")

    @property
    def is_complete(self) -> bool:
        return bool(self.sid and self.token and self.number)


class WatchedItem(BaseModel):
    """A product page tracked for availability."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(..., description="Display name used in alerts")
    type: str = Field(..., description="Retailer identifier")
    url: str = Field(..., description="Product page URL")
    in_stock: bool = Field(False, alias="inStock", description="Set once the item was found in stock")

    def __str__(self) -> str:
        """String representation of the item."""
        state = "IN STOCK" if self.in_stock else "watching"
        return f"{self.name} ({self.type}): {state}"


class Settings(BaseModel):
    """Everything the watcher needs, as stored in the settings file."""

    # hand-added keys survive a rewrite of the file
    model_config = ConfigDict(extra="allow")

    phone: str = Field("", description="Phone number that receives alerts")
    twilio: TwilioCredentials = Field(default_factory=TwilioCredentials)
    items: List[WatchedItem] = Field(default_factory=list)
    interval: Optional[int] = Field(None, description="Milliseconds between sweeps")

    @property
    def is_complete(self) -> bool:
        """True when alerts can be sent and there is something to watch."""
        return bool(self.phone) and self.twilio.is_complete and len(self.items) > 0

    @property
    def poll_interval_ms(self) -> int:
        return self.interval if self.interval and self.interval > 0 else config.DEFAULT_INTERVAL_MS

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
