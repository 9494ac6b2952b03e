"""
Business Logic Layer Module.

The middle layer of the three-layer architecture: it coordinates the handlers
above with the data access layer, the audit trail and the event publisher
below, and owns the ordering of side effects for each item operation.
"""

from items_service.logic.audit import AuditRecord, AuditRecorder, DynamoDBAuditSink, LoggerAuditSink
from items_service.logic.item_service import ItemService

__all__ = [
    "AuditRecord",
    "AuditRecorder",
    "DynamoDBAuditSink",
    "LoggerAuditSink",
    "ItemService",
]
