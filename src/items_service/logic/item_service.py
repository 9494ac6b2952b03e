"""
Business Logic Layer for item management.

ItemService orchestrates the store, the audit recorder and the event publisher
for every item operation. Side effects run in a fixed order and the first
failure ends the operation:

create: normalize -> validate -> store.create -> audit -> publish Created
delete: lookup -> audit -> store.delete -> publish Deleted

Store and queue are not transactionally coupled. A publish failure after a
successful write is logged and re-raised, and the write is not rolled back.
"""

from datetime import datetime, timezone
from typing import List, Optional

from aws_lambda_powertools.metrics import MetricUnit

from items_service.dal import ItemStore
from items_service.events.event_publisher import ItemEventPublisher
from items_service.events.event_schemas import ItemEvent, ItemEventType
from items_service.handlers.utils.errors import (
    ErrorContext,
    EventPublishError,
    ItemNotFoundError,
    ItemValidationError,
)
from items_service.handlers.utils.observability import logger, metrics, tracer
from items_service.logic.audit import ANONYMOUS_USER, AuditRecorder
from items_service.models.input import CreateItemRequest
from items_service.models.item import Item, normalize_item
from items_service.models.validation import validate_item


class ItemService:
    """Business logic service for item management."""

    def __init__(
        self,
        store: ItemStore,
        publisher: ItemEventPublisher,
        audit_recorder: Optional[AuditRecorder] = None,
    ):
        """
        Initialize item service.

        Args:
            store: Item persistence adapter
            publisher: Queue publisher for item events
            audit_recorder: Audit recorder, log-only when omitted
        """
        self.store = store
        self.publisher = publisher
        self.audit_recorder = audit_recorder or AuditRecorder()

    @tracer.capture_method
    def list_items(self) -> List[Item]:
        """Return every stored item, unordered."""
        return self.store.list()

    @tracer.capture_method
    def get_item(self, item_id: str, context: Optional[ErrorContext] = None) -> Item:
        """
        Look up a single item.

        Raises:
            ItemNotFoundError: If no item has this ID
        """
        item = self.store.get(item_id)
        if item is None:
            raise ItemNotFoundError(item_id, context=context)
        return item

    @tracer.capture_method
    def create_item(self, request: CreateItemRequest, context: ErrorContext) -> Item:
        """
        Create an item from a parsed request.

        Args:
            request: Parsed request body
            context: Request-scoped error context

        Returns:
            The stored item, with generated defaults filled in

        Raises:
            ItemValidationError: If the item breaks a validation rule; nothing is written
            ItemStoreError: If the write fails
            EventPublishError: If the item was stored but the Created event was not published
        """
        item = normalize_item(request)

        try:
            validate_item(item)
        except ItemValidationError as e:
            e.context = context
            metrics.add_metric(name="ItemValidationFailed", unit=MetricUnit.Count, value=1)
            raise

        self.store.create(item)

        audit_record = self.audit_recorder.build(
            action="create",
            item=item,
            request_id=context.request_id,
            user_id=context.user_id or ANONYMOUS_USER,
        )
        self.audit_recorder.record(audit_record)

        self._publish(ItemEvent(event_type=ItemEventType.CREATED, item=item, timestamp=datetime.now(timezone.utc)), context)

        metrics.add_metric(name="ItemCreated", unit=MetricUnit.Count, value=1)
        tracer.put_annotation("item_id", item.id)

        return item

    @tracer.capture_method
    def delete_item(self, item_id: str, context: ErrorContext) -> Item:
        """
        Delete an existing item.

        Args:
            item_id: Identifier of the item to delete
            context: Request-scoped error context

        Returns:
            The item as it was before deletion

        Raises:
            ItemNotFoundError: If no item has this ID
            ItemStoreError: If the lookup or delete fails
            EventPublishError: If the item was deleted but the Deleted event was not published
        """
        existing = self.get_item(item_id, context=context)

        audit_record = self.audit_recorder.build(
            action="delete",
            item=existing,
            request_id=context.request_id,
            previous_state=existing.to_json(),
            user_id=context.user_id or ANONYMOUS_USER,
        )
        self.audit_recorder.record(audit_record)

        self.store.delete(item_id)

        self._publish(ItemEvent(event_type=ItemEventType.DELETED, item=existing, timestamp=datetime.now(timezone.utc)), context)

        metrics.add_metric(name="ItemDeleted", unit=MetricUnit.Count, value=1)
        tracer.put_annotation("item_id", item_id)

        return existing

    def _publish(self, event: ItemEvent, context: ErrorContext) -> None:
        try:
            self.publisher.publish(event)
        except EventPublishError as e:
            e.context = context
            logger.error("Item stored but event not published", extra={
                "item_id": event.item.id,
                "event_type": event.event_type.value,
                "request_id": context.request_id,
            })
            raise
