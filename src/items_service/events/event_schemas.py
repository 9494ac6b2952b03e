"""
Event schemas for item mutation events.

This module defines the event published to the queue after every successful
mutation and its wire format:
{"event_type": "Created"|"Updated"|"Deleted", "item": <Item JSON>, "timestamp": <ISO-8601>}
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ValidationError

from items_service.handlers.utils.errors import SerializationError
from items_service.models.item import Item


class ItemEventType(str, Enum):
    """Kinds of item mutation an event can describe."""

    CREATED = "Created"
    UPDATED = "Updated"
    DELETED = "Deleted"


class ItemEvent(BaseModel):
    """Notification describing a mutation to an item."""

    event_type: ItemEventType
    item: Item
    timestamp: datetime

    def to_wire(self) -> Dict[str, Any]:
        """Convert to the JSON-ready queue message shape."""
        return {
            "event_type": self.event_type.value,
            "item": self.item.to_wire(),
            "timestamp": self.timestamp.isoformat(),
        }

    def to_message_body(self) -> str:
        """Serialize to the queue message body."""
        return json.dumps(self.to_wire())

    @classmethod
    def from_message_body(cls, body: str) -> 'ItemEvent':
        """
        Parse a queue message body.

        No partial recovery: any missing or malformed field fails the whole
        message.

        Args:
            body: Raw message body

        Returns:
            Parsed ItemEvent

        Raises:
            SerializationError: If the body is not a valid item event
        """
        try:
            return cls.model_validate_json(body)
        except ValidationError as e:
            raise SerializationError(f"Invalid item event: {e.error_count()} validation error(s): {e.errors()[0]['msg']}") from e
