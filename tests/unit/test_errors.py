"""
Unit tests for the service error taxonomy.

This module tests error codes, status mapping and the response body shape
produced at the API boundary.
"""

import pytest

from items_service.handlers.utils.errors import (
    AuditWriteError,
    EventProcessingError,
    EventPublishError,
    InternalServiceError,
    ItemNotFoundError,
    ItemStoreError,
    ItemValidationError,
    MalformedRequestError,
    SerializationError,
    ValidationFailure,
    create_error_context,
    format_error_response,
    get_http_status_code,
    log_error_metrics,
)
from items_service.handlers.utils.observability import metrics


class TestHttpStatusMapping:
    """Test cases for get_http_status_code."""

    @pytest.mark.parametrize("error, status_code", [
        (ItemValidationError(ValidationFailure.EMPTY_NAME, "Item name cannot be empty"), 400),
        (MalformedRequestError("Invalid JSON in request body"), 400),
        (ItemNotFoundError("abc"), 404),
        (ItemStoreError("boom", operation="PutItem", table_name="t"), 500),
        (EventPublishError("boom", queue_url="q"), 500),
        (SerializationError("bad"), 500),
        (AuditWriteError("boom"), 500),
        (EventProcessingError("boom"), 500),
        (InternalServiceError("boom"), 500),
    ])
    def test_status_codes(self, error, status_code):
        """Test the status code for every error kind."""
        assert get_http_status_code(error) == status_code

    def test_malformed_request_is_serialization_error(self):
        """Test that request-body errors are a kind of serialization error."""
        assert isinstance(MalformedRequestError("bad"), SerializationError)


class TestErrorResponse:
    """Test cases for the error body shape."""

    def test_not_found_body(self):
        """Test the exact not-found message."""
        assert format_error_response(ItemNotFoundError("missing-id")) == {"message": "Item with ID missing-id not found"}

    def test_validation_body(self):
        """Test that validation errors expose only their message."""
        error = ItemValidationError(ValidationFailure.INVALID_CLASSIFICATION, "Invalid classification: X")

        assert format_error_response(error) == {"message": "Invalid classification: X"}


class TestErrorContext:
    """Test cases for error context handling."""

    def test_create_error_context(self):
        """Test that extra keyword arguments land in additional_data."""
        context = create_error_context("req-1", "create_item", user_id="user-1", resource_id="item-1", attempt=2)

        assert context.request_id == "req-1"
        assert context.operation == "create_item"
        assert context.user_id == "user-1"
        assert context.resource_id == "item-1"
        assert context.additional_data == {"attempt": 2}

    def test_to_dict_includes_context(self):
        """Test that serialized errors carry their context."""
        context = create_error_context("req-1", "get_item")
        error = ItemNotFoundError("abc", context=context)

        data = error.to_dict()

        assert data["error_code"] == "RESOURCE_NOT_FOUND"
        assert data["severity"] == "LOW"
        assert data["context"]["request_id"] == "req-1"
        assert data["error_id"]

    def test_to_dict_avoids_reserved_log_keys(self):
        """Test that the serialized error can be passed as logging extra."""
        data = ItemNotFoundError("abc").to_dict()

        assert "message" not in data
        assert data["error_message"] == "Item with ID abc not found"


class TestErrorLogging:
    """Test cases for log_error_metrics with the real Powertools logger."""

    @pytest.fixture(autouse=True)
    def clear_metrics(self):
        yield
        metrics.clear_metrics()

    @pytest.mark.parametrize("error", [
        ItemNotFoundError("abc", context=create_error_context("req-1", "get_item", resource_id="abc")),
        ItemValidationError(ValidationFailure.EMPTY_NAME, "Item name cannot be empty"),
        InternalServiceError("kaboom"),
    ])
    def test_log_error_metrics_does_not_raise(self, error):
        """Test that logging a service error emits without a LogRecord key clash."""
        log_error_metrics(error)
