from tortoise import fields, models
import uuid


class ProcessedEvent(models.Model):
    """
    Stores the webhookEventId of every handled LINE event so that
    redelivered events are not turned into a second order.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    event_id = fields.CharField(max_length=128, unique=True)
    event_kind = fields.CharField(max_length=32, default="message")
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "processed_events"
