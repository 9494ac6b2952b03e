"""
DynamoDB implementation of the item store.

Items live in a single table keyed by the string attribute ``id``. Every field
is written as a string attribute and optional fields are omitted when absent.
Reads are lenient: missing fields fall back to defaults and unparseable
timestamps fall back to the current time.
"""

import functools
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, TypeVar

import boto3
from aws_lambda_powertools.metrics import MetricUnit
from botocore.exceptions import BotoCoreError, ClientError

from items_service.handlers.utils.errors import ItemStoreError
from items_service.handlers.utils.observability import logger, metrics, tracer
from items_service.models.item import DEFAULT_CLASSIFICATION, Item, ensure_utc

T = TypeVar('T')


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp, falling back to now on failure."""
    if isinstance(value, str):
        try:
            return ensure_utc(datetime.fromisoformat(value.replace('Z', '+00:00')))
        except ValueError:
            logger.warning("Unparseable timestamp in stored item", extra={"value": value})
    return datetime.now(timezone.utc)


def _handle_dynamodb_errors(operation: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Translate boto3 failures into ItemStoreError and record operation metrics."""

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(self: 'DynamoDBItemStore', *args: Any, **kwargs: Any) -> T:
            operation_start = time.time()

            try:
                result = func(self, *args, **kwargs)

                operation_duration = (time.time() - operation_start) * 1000
                metrics.add_metric(name=f"DynamoDB{operation}Duration", unit=MetricUnit.Milliseconds, value=operation_duration)
                tracer.put_annotation("dynamodb_operation", operation)

                return result

            except ClientError as e:
                error_code = e.response['Error']['Code']
                error_message = e.response['Error']['Message']

                metrics.add_metric(name=f"DynamoDB{operation}Error", unit=MetricUnit.Count, value=1)
                logger.error(f"DynamoDB {operation} error", extra={
                    "error_code": error_code,
                    "error_message": error_message,
                    "table_name": self.table_name,
                })

                raise ItemStoreError(
                    message=f"DynamoDB {operation} failed: {error_code}: {error_message}",
                    operation=operation,
                    table_name=self.table_name,
                    aws_error_code=error_code,
                ) from e

            except BotoCoreError as e:
                metrics.add_metric(name=f"DynamoDB{operation}Error", unit=MetricUnit.Count, value=1)
                logger.error(f"DynamoDB connection error during {operation}", extra={
                    "error": str(e),
                    "table_name": self.table_name,
                })

                raise ItemStoreError(
                    message=f"DynamoDB {operation} failed: {e}",
                    operation=operation,
                    table_name=self.table_name,
                ) from e

        return wrapper

    return decorator


class DynamoDBItemStore:
    """DynamoDB implementation of the item store."""

    def __init__(
        self,
        table_name: str,
        endpoint_url: Optional[str] = None,
        region_name: Optional[str] = None,
    ) -> None:
        """
        Initialize the DynamoDB item store.

        Args:
            table_name: Name of the DynamoDB table
            endpoint_url: DynamoDB endpoint URL (for local testing)
            region_name: AWS region name
        """
        self.table_name = table_name

        session_config: Dict[str, Any] = {}
        if region_name:
            session_config['region_name'] = region_name
        if endpoint_url:
            session_config['endpoint_url'] = endpoint_url

        self.dynamodb = boto3.resource('dynamodb', **session_config)
        self.table = self.dynamodb.Table(table_name)

        logger.debug("DynamoDB item store initialized", extra={
            "table_name": table_name,
            "endpoint_url": endpoint_url,
        })

    @tracer.capture_method
    @_handle_dynamodb_errors("PutItem")
    def create(self, item: Item) -> None:
        """
        Write a new item.

        Args:
            item: Item to persist

        Raises:
            ItemStoreError: If the DynamoDB operation fails
        """
        self.table.put_item(Item=self._item_to_record(item))

        logger.info("Item stored", extra={"item_id": item.id, "table_name": self.table_name})

    @tracer.capture_method
    @_handle_dynamodb_errors("GetItem")
    def get(self, item_id: str) -> Optional[Item]:
        """
        Retrieve an item by its ID.

        Args:
            item_id: Unique identifier of the item

        Returns:
            Item if found, None otherwise

        Raises:
            ItemStoreError: If the DynamoDB operation fails
        """
        response = self.table.get_item(Key={'id': item_id})

        record = response.get('Item')
        if not record:
            logger.info("Item not found", extra={"item_id": item_id})
            return None

        return self._record_to_item(record)

    @tracer.capture_method
    @_handle_dynamodb_errors("Scan")
    def list(self) -> List[Item]:
        """
        Return every item in the table.

        Records without an ``id`` or ``name`` attribute are skipped.

        Returns:
            Items in scan order

        Raises:
            ItemStoreError: If the DynamoDB operation fails
        """
        items: List[Item] = []
        scan_kwargs: Dict[str, Any] = {}

        while True:
            response = self.table.scan(**scan_kwargs)

            for record in response.get('Items', []):
                if not isinstance(record.get('id'), str) or not isinstance(record.get('name'), str):
                    logger.debug("Skipping malformed item record", extra={"record_keys": sorted(record)})
                    continue
                items.append(self._record_to_item(record))

            last_evaluated_key = response.get('LastEvaluatedKey')
            if not last_evaluated_key:
                break
            scan_kwargs['ExclusiveStartKey'] = last_evaluated_key

        logger.info("Scan completed", extra={"items_count": len(items), "table_name": self.table_name})
        tracer.put_annotation("items_listed", len(items))

        return items

    @tracer.capture_method
    @_handle_dynamodb_errors("DeleteItem")
    def delete(self, item_id: str) -> None:
        """
        Delete an item by its ID.

        Args:
            item_id: Unique identifier of the item

        Raises:
            ItemStoreError: If the DynamoDB operation fails
        """
        self.table.delete_item(Key={'id': item_id})

        logger.info("Item deleted", extra={"item_id": item_id, "table_name": self.table_name})

    @tracer.capture_method
    def health_check(self) -> Dict[str, str]:
        """
        Perform a health check on the DynamoDB table.

        Returns:
            Dictionary with health check results
        """
        try:
            response = self.table.meta.client.describe_table(TableName=self.table_name)
            table_status = response.get('Table', {}).get('TableStatus', 'UNKNOWN')

            return {
                'status': 'healthy' if table_status == 'ACTIVE' else 'unhealthy',
                'table': self.table_name,
                'table_status': table_status,
                'timestamp': datetime.now(timezone.utc).isoformat(),
            }

        except (ClientError, BotoCoreError) as e:
            logger.error("DynamoDB health check failed", extra={"error": str(e)})
            return {
                'status': 'unhealthy',
                'table': self.table_name,
                'error': str(e),
                'timestamp': datetime.now(timezone.utc).isoformat(),
            }

    def _item_to_record(self, item: Item) -> Dict[str, str]:
        """
        Convert an Item to DynamoDB attributes.

        Args:
            item: Item to convert

        Returns:
            String-typed attributes, optional fields omitted when absent
        """
        record = {
            'id': item.id,
            'name': item.name,
            'created_at': item.created_at.isoformat(),
            'classification': item.classification,
        }
        if item.description is not None:
            record['description'] = item.description
        return record

    def _record_to_item(self, record: Dict[str, Any]) -> Item:
        """
        Convert DynamoDB attributes to an Item.

        Args:
            record: DynamoDB item dictionary

        Returns:
            Item, with defaults for any missing field
        """
        description = record.get('description')
        return Item(
            id=str(record.get('id', '')),
            name=str(record.get('name', '')),
            description=str(description) if description is not None else None,
            created_at=parse_timestamp(record.get('created_at')),
            classification=str(record.get('classification', DEFAULT_CLASSIFICATION.value)),
        )
