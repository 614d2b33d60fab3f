from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class _LineModel(BaseModel):
    # LINE uses camelCase and adds fields over time; unknown keys are ignored
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class LineMessage(_LineModel):
    id: Optional[str] = None
    type: str
    text: Optional[str] = None


class DeliveryContext(_LineModel):
    is_redelivery: bool = Field(False, alias="isRedelivery")


class LineEvent(_LineModel):
    """A single webhook event. Only message events carry a message."""
    type: str
    reply_token: Optional[str] = Field(None, alias="replyToken")
    webhook_event_id: Optional[str] = Field(None, alias="webhookEventId")
    delivery_context: Optional[DeliveryContext] = Field(None, alias="deliveryContext")
    message: Optional[LineMessage] = None


class WebhookRequest(_LineModel):
    destination: Optional[str] = None
    events: List[LineEvent] = Field(default_factory=list)
