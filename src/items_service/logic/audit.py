"""
Audit trail for item mutations.

Every mutating operation builds an AuditRecord carrying before/after snapshots
and a SHA-256 content hash of the serialized item, then hands it to the
configured sinks. The structured log sink is always present; the DynamoDB sink
adds a durable, append-only copy when an audit table is configured.
"""

import hashlib
from datetime import datetime, timezone
from typing import List, Optional, Protocol, Sequence
from uuid import uuid4

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, Field

from items_service.handlers.utils.errors import AuditWriteError
from items_service.handlers.utils.observability import logger, tracer
from items_service.models.item import Item

ANONYMOUS_USER = "anonymous"
DELETE_ACTION = "delete"


class AuditRecord(BaseModel):
    """Tamper-evident record of a single mutation."""

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    action: str
    resource_id: str
    resource_type: str = "item"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    previous_state: Optional[str] = None
    new_state: Optional[str] = None
    request_id: str
    hash: str


def content_hash(item: Item) -> str:
    """SHA-256 hex digest of the item's canonical serialization."""
    return hashlib.sha256(item.to_json().encode('utf-8')).hexdigest()


class AuditSink(Protocol):
    """Destination for audit records."""

    def write(self, record: AuditRecord) -> None:
        ...


class LoggerAuditSink:
    """Writes audit records as structured log lines."""

    def write(self, record: AuditRecord) -> None:
        logger.info("Audit record", extra={"audit": record.model_dump(mode="json")})


class DynamoDBAuditSink:
    """Appends audit records to a DynamoDB table keyed by ``event_id``."""

    def __init__(self, table_name: str, endpoint_url: Optional[str] = None) -> None:
        self.table_name = table_name
        resource_kwargs = {'endpoint_url': endpoint_url} if endpoint_url else {}
        self.table = boto3.resource('dynamodb', **resource_kwargs).Table(table_name)

    @tracer.capture_method
    def write(self, record: AuditRecord) -> None:
        # DynamoDB rejects null attributes, so absent snapshots are dropped
        attributes = record.model_dump(mode="json", exclude_none=True)
        try:
            self.table.put_item(
                Item=attributes,
                ConditionExpression='attribute_not_exists(event_id)',
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to persist audit record", extra={
                "event_id": record.event_id,
                "table_name": self.table_name,
                "error": str(e),
            })
            raise AuditWriteError(f"Failed to persist audit record {record.event_id}: {e}") from e


class AuditRecorder:
    """Builds audit records and forwards them to the configured sinks."""

    def __init__(self, sinks: Optional[Sequence[AuditSink]] = None) -> None:
        self.sinks: List[AuditSink] = list(sinks) if sinks is not None else [LoggerAuditSink()]

    def build(
        self,
        action: str,
        item: Item,
        request_id: str,
        previous_state: Optional[str] = None,
        user_id: str = ANONYMOUS_USER,
    ) -> AuditRecord:
        """
        Build an audit record for a mutation of ``item``.

        Args:
            action: Mutation name, e.g. "create" or "delete"
            item: Item the mutation applies to
            request_id: Identifier of the originating request
            previous_state: Serialized item before the mutation, if any
            user_id: Acting principal

        Returns:
            AuditRecord; new_state is omitted for deletes
        """
        return AuditRecord(
            user_id=user_id,
            action=action,
            resource_id=item.id,
            previous_state=previous_state,
            new_state=None if action == DELETE_ACTION else item.to_json(),
            request_id=request_id,
            hash=content_hash(item),
        )

    @tracer.capture_method
    def record(self, record: AuditRecord) -> None:
        """Hand a record to every sink. Sink failures propagate to the caller."""
        for sink in self.sinks:
            sink.write(record)
