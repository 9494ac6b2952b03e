"""
Items Service Module.

Core implementation of the item lifecycle pipeline, following the three-layer
architecture pattern:

- handlers: API router, SQS consumer and Lambda wiring
- logic: Item orchestration and the audit trail
- dal: Data access layer for persistence
- models: Item model, request parsing and validation rules
- events: Item event schema and queue publisher
"""

__version__ = "1.0.0"
__description__ = "Item lifecycle service with audit trail and event publishing"

from items_service.models.item import Classification, Item
from items_service.models.input import CreateItemRequest
from items_service.events.event_schemas import ItemEvent, ItemEventType
from items_service.handlers.utils.observability import logger, tracer, metrics

__all__ = [
    "Classification",
    "Item",
    "CreateItemRequest",
    "ItemEvent",
    "ItemEventType",
    "logger",
    "tracer",
    "metrics",
]
