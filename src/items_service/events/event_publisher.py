"""
SQS publisher for item events.

Serializes an ItemEvent to its wire form and sends it as a single SQS message.
Failures surface as EventPublishError so callers can tell "stored but not
published" apart from "not stored".
"""

import time
from typing import Any, Optional

import boto3
from aws_lambda_powertools.metrics import MetricUnit
from botocore.exceptions import BotoCoreError, ClientError

from items_service.events.event_schemas import ItemEvent
from items_service.handlers.utils.errors import EventPublishError
from items_service.handlers.utils.observability import logger, metrics, tracer


class ItemEventPublisher:
    """Publishes item events to an SQS queue."""

    def __init__(self, queue_url: str, sqs_client: Optional[Any] = None, region_name: Optional[str] = None):
        """
        Initialize the publisher.

        Args:
            queue_url: URL of the destination queue
            sqs_client: Pre-built boto3 SQS client, created when omitted
            region_name: AWS region used when creating the client
        """
        self.queue_url = queue_url
        self.sqs = sqs_client or boto3.client('sqs', region_name=region_name)

        logger.debug("ItemEventPublisher initialized", extra={"queue_url": queue_url})

    @tracer.capture_method
    def publish(self, event: ItemEvent) -> str:
        """
        Publish a single event.

        Args:
            event: Event to publish

        Returns:
            The queue's message ID

        Raises:
            EventPublishError: If the queue rejects the message or is unreachable
        """
        start_time = time.time()
        event_type = event.event_type.value

        try:
            response = self.sqs.send_message(
                QueueUrl=self.queue_url,
                MessageBody=event.to_message_body(),
                MessageAttributes={
                    'event_type': {'DataType': 'String', 'StringValue': event_type},
                },
            )
        except (ClientError, BotoCoreError) as e:
            metrics.add_metric(name="EventPublishError", unit=MetricUnit.Count, value=1)
            logger.error("Failed to publish item event", extra={
                "event_type": event_type,
                "item_id": event.item.id,
                "queue_url": self.queue_url,
                "error": str(e),
            })
            raise EventPublishError(
                message=f"Failed to publish {event_type} event for item {event.item.id}: {e}",
                queue_url=self.queue_url,
                event_type=event_type,
            ) from e

        duration_ms = (time.time() - start_time) * 1000
        message_id = response.get('MessageId', '')

        metrics.add_metric(name="EventPublishSuccess", unit=MetricUnit.Count, value=1)
        metrics.add_metric(name="EventPublishDuration", unit=MetricUnit.Milliseconds, value=duration_ms)
        logger.info("Item event published", extra={
            "event_type": event_type,
            "item_id": event.item.id,
            "message_id": message_id,
        })

        return message_id
