"""
Error taxonomy and error-to-response helpers for the items service.

Every failure the pipeline can produce is a subclass of BaseServiceError with a
stable error code. Conversion to an HTTP status and a JSON body happens only at
the API boundary, through get_http_status_code and format_error_response.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from aws_lambda_powertools.metrics import MetricUnit
from pydantic import BaseModel, Field

from items_service.handlers.utils.observability import logger, metrics, tracer


class ErrorSeverity(str, Enum):
    """Error severity levels for classification."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    BUSINESS_LOGIC = "BUSINESS_LOGIC"
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE"
    INFRASTRUCTURE = "INFRASTRUCTURE"


class ValidationFailure(str, Enum):
    """Reasons an item can fail validation, in rule order."""
    EMPTY_NAME = "EmptyName"
    NAME_TOO_LONG = "NameTooLong"
    INVALID_NAME_CHARS = "InvalidNameChars"
    DESCRIPTION_TOO_LONG = "DescriptionTooLong"
    INVALID_DESCRIPTION_CHARS = "InvalidDescriptionChars"
    INVALID_CLASSIFICATION = "InvalidClassification"


class ErrorContext(BaseModel):
    """Context information for errors."""

    request_id: str = Field(description="Unique request identifier")
    user_id: Optional[str] = Field(default=None, description="User identifier if available")
    operation: str = Field(description="Operation being performed")
    resource_id: Optional[str] = Field(default=None, description="Resource identifier")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    additional_data: Dict[str, Any] = Field(default_factory=dict)


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.BUSINESS_LOGIC,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.context = context
        self.error_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "error_message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "context": self.context.model_dump(mode="json") if self.context else None,
        }


class ItemValidationError(BaseServiceError):
    """Raised when an item breaks one of the validation rules."""

    def __init__(
        self,
        reason: ValidationFailure,
        message: str,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            context=context,
        )
        self.reason = reason


class ItemNotFoundError(BaseServiceError):
    """Raised when a requested item does not exist."""

    def __init__(self, item_id: str, context: Optional[ErrorContext] = None):
        super().__init__(
            message=f"Item with ID {item_id} not found",
            error_code="RESOURCE_NOT_FOUND",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.BUSINESS_LOGIC,
            context=context,
        )
        self.item_id = item_id


class SerializationError(BaseServiceError):
    """Raised when a payload cannot be serialized or deserialized."""

    def __init__(
        self,
        message: str,
        error_code: str = "SERIALIZATION_ERROR",
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.VALIDATION,
            context=context,
        )


class MalformedRequestError(SerializationError):
    """Raised when a request body is not valid JSON or has the wrong shape."""

    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        super().__init__(message=message, error_code="MALFORMED_REQUEST", context=context)


class ItemStoreError(BaseServiceError):
    """Raised when the backing key-value store fails."""

    def __init__(
        self,
        message: str,
        operation: str,
        table_name: str,
        aws_error_code: Optional[str] = None,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code="STORE_ERROR",
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.INFRASTRUCTURE,
            context=context,
        )
        self.operation = operation
        self.table_name = table_name
        self.aws_error_code = aws_error_code


class EventPublishError(BaseServiceError):
    """Raised when an item event cannot be handed to the queue."""

    def __init__(
        self,
        message: str,
        queue_url: str,
        event_type: Optional[str] = None,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code="PUBLISH_ERROR",
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.EXTERNAL_SERVICE,
            context=context,
        )
        self.queue_url = queue_url
        self.event_type = event_type


class AuditWriteError(BaseServiceError):
    """Raised when a durable audit sink rejects a record."""

    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        super().__init__(
            message=message,
            error_code="AUDIT_WRITE_ERROR",
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.INFRASTRUCTURE,
            context=context,
        )


class EventProcessingError(BaseServiceError):
    """Raised when a queued message cannot be processed."""

    def __init__(
        self,
        message: str,
        message_id: Optional[str] = None,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code="EVENT_PROCESSING_ERROR",
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.INFRASTRUCTURE,
            context=context,
        )
        self.message_id = message_id


class InternalServiceError(BaseServiceError):
    """Raised for failures that fit no other category."""

    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        super().__init__(
            message=message,
            error_code="INTERNAL_ERROR",
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.INFRASTRUCTURE,
            context=context,
        )


def create_error_context(
    request_id: str,
    operation: str,
    user_id: Optional[str] = None,
    resource_id: Optional[str] = None,
    **additional_data: Any,
) -> ErrorContext:
    """Create an error context for consistent error handling."""
    return ErrorContext(
        request_id=request_id,
        user_id=user_id,
        operation=operation,
        resource_id=resource_id,
        additional_data=additional_data,
    )


@tracer.capture_method
def log_error_metrics(error: BaseServiceError) -> None:
    """Log error metrics for monitoring and alerting."""

    metrics.add_metric(name="ErrorCount", unit=MetricUnit.Count, value=1)
    metrics.add_metric(name=f"Error{error.category.value}Count", unit=MetricUnit.Count, value=1)

    tracer.put_annotation("error_code", error.error_code)
    tracer.put_metadata("error_details", error.to_dict())

    logger.error(
        "Service error occurred",
        extra={
            "error_id": error.error_id,
            "error_code": error.error_code,
            "error_severity": error.severity.value,
            "error_category": error.category.value,
            "error_message": error.message,
            "context": error.context.model_dump(mode="json") if error.context else None,
        }
    )


def format_error_response(error: BaseServiceError) -> Dict[str, Any]:
    """Format error for API response."""
    return {"message": error.message}


def get_http_status_code(error: BaseServiceError) -> int:
    """Get appropriate HTTP status code for error."""

    status_mapping = {
        "VALIDATION_ERROR": 400,
        "MALFORMED_REQUEST": 400,
        "RESOURCE_NOT_FOUND": 404,
    }

    return status_mapping.get(error.error_code, 500)
