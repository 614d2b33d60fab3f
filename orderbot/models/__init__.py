# orderbot/models/__init__.py
from .processed_event import ProcessedEvent

__all__ = [
    "ProcessedEvent",
]
