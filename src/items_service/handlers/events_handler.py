"""
Item Events Handler - SQS consumer for item mutation events.

Each invocation processes one SQS batch sequentially. Every message must carry
a valid ItemEvent; the first failure aborts the batch so the queue redelivers
it. Delivery is at-least-once, so per-type handlers must tolerate duplicates.
"""

import time
from typing import Any, Callable, Dict, Mapping, Optional

from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.data_classes import SQSEvent
from aws_lambda_powertools.utilities.data_classes.sqs_event import SQSRecord
from aws_lambda_powertools.utilities.typing import LambdaContext

from items_service.events.event_schemas import ItemEvent, ItemEventType
from items_service.handlers.models.env_vars import ItemEventsEnvVars, get_item_events_env_vars
from items_service.handlers.utils.errors import EventProcessingError
from items_service.handlers.utils.observability import logger, metrics, tracer

EventTypeHandler = Callable[[ItemEvent], None]
LambdaHandler = Callable[[Dict[str, Any], LambdaContext], Dict[str, Any]]

DEFAULT_PROCESSING_DELAY_SECONDS = 0.1


class ItemEventProcessor:
    """
    Dispatches queued item events to one handler per event type.

    The dispatch table must cover every ItemEventType; a missing entry is
    rejected at construction time rather than discovered when such an event
    arrives.
    """

    def __init__(
        self,
        handlers: Optional[Mapping[ItemEventType, EventTypeHandler]] = None,
        processing_delay: float = DEFAULT_PROCESSING_DELAY_SECONDS,
    ) -> None:
        """
        Args:
            handlers: Complete dispatch table, the default handlers when omitted
            processing_delay: Simulated processing time per event, in seconds
        """
        self.processing_delay = processing_delay

        if handlers is None:
            handlers = {
                ItemEventType.CREATED: self.handle_created,
                ItemEventType.UPDATED: self.handle_updated,
                ItemEventType.DELETED: self.handle_deleted,
            }
        self.handlers: Dict[ItemEventType, EventTypeHandler] = dict(handlers)

        missing = set(ItemEventType) - set(self.handlers)
        if missing:
            raise ValueError(f"No handler registered for event types: {sorted(t.value for t in missing)}")

    @tracer.capture_method
    def process_batch(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """
        Process every record of an SQS event in order.

        Args:
            event: Raw SQS Lambda event

        Returns:
            Summary with the number of processed messages

        Raises:
            EventProcessingError: If a message has no body
            SerializationError: If a message body is not a valid ItemEvent
        """
        sqs_event = SQSEvent(event)
        records = list(sqs_event.records)

        logger.info("Processing SQS messages", extra={"message_count": len(records)})

        for record in records:
            self.process_record(record)

        return {"processed": len(records)}

    def process_record(self, record: SQSRecord) -> ItemEvent:
        """Parse one SQS record and dispatch it by event type."""
        message_id = record.get('messageId') or 'unknown'
        body = record.get('body')

        if body is None:
            logger.error("SQS message has no body", extra={"message_id": message_id})
            raise EventProcessingError("SQS message has no body", message_id=message_id)

        logger.info("Processing SQS message", extra={"message_id": message_id})

        item_event = ItemEvent.from_message_body(body)
        self.handlers[item_event.event_type](item_event)

        metrics.add_metric(name=f"Item{item_event.event_type.value}EventProcessed", unit=MetricUnit.Count, value=1)
        logger.info("Successfully processed item event", extra={
            "message_id": message_id,
            "event_type": item_event.event_type.value,
            "item_id": item_event.item.id,
        })

        return item_event

    def handle_created(self, event: ItemEvent) -> None:
        logger.info("Item created event", extra={"item_id": event.item.id})
        self._simulate_processing()

    def handle_updated(self, event: ItemEvent) -> None:
        logger.info("Item updated event", extra={"item_id": event.item.id})
        self._simulate_processing()

    def handle_deleted(self, event: ItemEvent) -> None:
        logger.info("Item deleted event", extra={"item_id": event.item.id})
        self._simulate_processing()

    def _simulate_processing(self) -> None:
        if self.processing_delay > 0:
            time.sleep(self.processing_delay)


def build_item_event_processor(env_vars: Optional[ItemEventsEnvVars] = None) -> ItemEventProcessor:
    """Wire the event processor from environment variables."""
    env_vars = env_vars or get_item_events_env_vars()
    return ItemEventProcessor(processing_delay=env_vars.EVENT_PROCESSING_DELAY_MS / 1000)


def create_lambda_handler(processor: ItemEventProcessor) -> LambdaHandler:
    """
    Build the Lambda entry callable for an ItemEventProcessor.

    Failures are logged and re-raised so the whole batch is retried.
    """

    @tracer.capture_lambda_handler
    @logger.inject_lambda_context
    @metrics.log_metrics(capture_cold_start_metric=True)
    def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
        try:
            return processor.process_batch(event)
        except Exception as e:
            metrics.add_metric(name="EventBatchFailed", unit=MetricUnit.Count, value=1)
            logger.exception("Item event batch failed", extra={"error": str(e)})
            raise

    return lambda_handler
