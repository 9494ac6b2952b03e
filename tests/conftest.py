"""
Pytest configuration and shared fixtures for the items service.

This module provides common test fixtures and configuration used across
unit, integration, and end-to-end tests.
"""

import base64
import json
import os
import pytest
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import Mock

import boto3
from aws_lambda_env_modeler import modeler_impl
from moto import mock_aws

from items_service.dal.dynamodb_handler import DynamoDBItemStore
from items_service.events.event_publisher import ItemEventPublisher
from items_service.handlers.items_handler import ItemsApi
from items_service.logic.audit import AuditRecorder, DynamoDBAuditSink, LoggerAuditSink
from items_service.logic.item_service import ItemService
from items_service.models.item import Item

TEST_TABLE_NAME = "test-items-table"
TEST_AUDIT_TABLE_NAME = "test-items-audit-table"
TEST_QUEUE_NAME = "test-item-events"


# Test environment configuration
@pytest.fixture(scope="session", autouse=True)
def test_environment():
    """Set up test environment variables."""
    os.environ.update({
        "AWS_DEFAULT_REGION": "us-east-1",
        "AWS_ACCESS_KEY_ID": "test",
        "AWS_SECRET_ACCESS_KEY": "test",
        "TABLE_NAME": TEST_TABLE_NAME,
        "EVENT_QUEUE_URL": f"https://sqs.us-east-1.amazonaws.com/123456789012/{TEST_QUEUE_NAME}",
        "ENVIRONMENT": "test",
        "POWERTOOLS_SERVICE_NAME": "test-items-service",
        "LOG_LEVEL": "DEBUG",
        "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
        "EVENT_PROCESSING_DELAY_MS": "0",
    })


def _clear_env_model_cache():
    """Clear aws_lambda_env_modeler's per-model lru_cache."""
    getattr(modeler_impl, "__parse_model_with_cache").cache_clear()


@pytest.fixture(autouse=True)
def reset_env_vars_cache():
    """Drop cached environment models so each test sees its own environment."""
    _clear_env_model_cache()
    yield
    _clear_env_model_cache()


# AWS fixtures
@pytest.fixture
def aws_mock():
    """Run the test against moto's in-memory AWS backend."""
    with mock_aws():
        yield


@pytest.fixture
def dynamodb_table(aws_mock):
    """Create a mock items table keyed by id."""
    dynamodb = boto3.resource("dynamodb", region_name="us-east-1")

    table = dynamodb.create_table(
        TableName=TEST_TABLE_NAME,
        KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )

    table.wait_until_exists()
    yield table


@pytest.fixture
def audit_table(aws_mock):
    """Create a mock audit table keyed by event_id."""
    dynamodb = boto3.resource("dynamodb", region_name="us-east-1")

    table = dynamodb.create_table(
        TableName=TEST_AUDIT_TABLE_NAME,
        KeySchema=[{"AttributeName": "event_id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "event_id", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )

    table.wait_until_exists()
    yield table


@pytest.fixture
def sqs_queue_url(aws_mock) -> str:
    """Create a mock item events queue and return its URL."""
    sqs = boto3.client("sqs", region_name="us-east-1")
    return sqs.create_queue(QueueName=TEST_QUEUE_NAME)["QueueUrl"]


@pytest.fixture
def receive_messages(sqs_queue_url) -> Callable[[], List[Dict[str, Any]]]:
    """Drain and return every message currently on the test queue."""
    sqs = boto3.client("sqs", region_name="us-east-1")

    def receive() -> List[Dict[str, Any]]:
        response = sqs.receive_message(
            QueueUrl=sqs_queue_url,
            MaxNumberOfMessages=10,
            MessageAttributeNames=["All"],
        )
        return response.get("Messages", [])

    return receive


# Component fixtures
@pytest.fixture
def item_store(dynamodb_table) -> DynamoDBItemStore:
    return DynamoDBItemStore(TEST_TABLE_NAME, region_name="us-east-1")


@pytest.fixture
def event_publisher(sqs_queue_url) -> ItemEventPublisher:
    return ItemEventPublisher(queue_url=sqs_queue_url, region_name="us-east-1")


@pytest.fixture
def audit_recorder(audit_table) -> AuditRecorder:
    return AuditRecorder([LoggerAuditSink(), DynamoDBAuditSink(TEST_AUDIT_TABLE_NAME)])


@pytest.fixture
def item_service(item_store, event_publisher, audit_recorder) -> ItemService:
    return ItemService(store=item_store, publisher=event_publisher, audit_recorder=audit_recorder)


@pytest.fixture
def items_api(item_service) -> ItemsApi:
    return ItemsApi(item_service)


# Sample data fixtures
@pytest.fixture
def sample_item() -> Item:
    """Create a sample item for testing."""
    return Item(
        id="item-123",
        name="Widget",
        description="A small widget",
        created_at=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        classification="PUBLIC",
    )


# Event fixtures
@pytest.fixture
def api_gateway_event() -> Callable[..., Dict[str, Any]]:
    """Factory for API Gateway REST proxy events."""

    def create_event(
        method: str,
        path: str,
        body: Optional[Any] = None,
        principal_id: Optional[str] = None,
        request_id: str = "test-request-id-123",
        is_base64_encoded: bool = False,
    ) -> Dict[str, Any]:
        if body is not None and not isinstance(body, str):
            body = json.dumps(body)
        if body is not None and is_base64_encoded:
            body = base64.b64encode(body.encode("utf-8")).decode("ascii")

        request_context: Dict[str, Any] = {
            "requestId": request_id,
            "accountId": "123456789012",
            "stage": "test",
            "httpMethod": method,
            "path": path,
            "resourcePath": path,
            "protocol": "HTTP/1.1",
            "requestTime": "2024-01-01T12:00:00.000Z",
            "requestTimeEpoch": 1704110400000,
            "identity": {
                "sourceIp": "127.0.0.1",
                "userAgent": "test-agent/1.0",
            },
        }
        if principal_id:
            request_context["authorizer"] = {"principalId": principal_id}

        return {
            "resource": path,
            "httpMethod": method,
            "path": path,
            "headers": {
                "Content-Type": "application/json",
                "User-Agent": "test-agent/1.0",
            },
            "multiValueHeaders": {
                "Content-Type": ["application/json"],
                "User-Agent": ["test-agent/1.0"],
            },
            "body": body,
            "requestContext": request_context,
            "pathParameters": None,
            "queryStringParameters": None,
            "multiValueQueryStringParameters": None,
            "stageVariables": None,
            "isBase64Encoded": is_base64_encoded,
        }

    return create_event


@pytest.fixture
def sqs_event() -> Callable[..., Dict[str, Any]]:
    """Factory for SQS events; a None body produces a record without one."""

    def create_event(*bodies: Optional[str]) -> Dict[str, Any]:
        records = []
        for index, body in enumerate(bodies):
            record: Dict[str, Any] = {
                "messageId": f"message-{index}",
                "receiptHandle": f"receipt-{index}",
                "attributes": {
                    "ApproximateReceiveCount": "1",
                    "SentTimestamp": "1704110400000",
                    "SenderId": "123456789012",
                    "ApproximateFirstReceiveTimestamp": "1704110400001",
                },
                "messageAttributes": {},
                "md5OfBody": "",
                "eventSource": "aws:sqs",
                "eventSourceARN": f"arn:aws:sqs:us-east-1:123456789012:{TEST_QUEUE_NAME}",
                "awsRegion": "us-east-1",
            }
            if body is not None:
                record["body"] = body
            records.append(record)
        return {"Records": records}

    return create_event


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context for testing."""
    context = Mock()
    context.function_name = "test-lambda-function"
    context.function_version = "1"
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-lambda-function"
    context.memory_limit_in_mb = "512"
    context.remaining_time_in_millis = lambda: 30000
    context.aws_request_id = "test-request-id-123"
    context.log_group_name = "/aws/lambda/test-lambda-function"
    context.log_stream_name = "2024/01/01/[$LATEST]test123"
    return context


# Integration test fixtures
@pytest.fixture
def integration_client():
    """HTTP client for end-to-end testing against a deployed API."""
    import httpx

    base_url = os.environ.get("API_BASE_URL")
    if not base_url:
        pytest.skip("API_BASE_URL is not set")

    with httpx.Client(base_url=base_url, timeout=30.0) as client:
        yield client


# Error simulation fixtures
@pytest.fixture
def mock_client_error():
    """Build botocore ClientErrors for testing error handling."""
    from botocore.exceptions import ClientError

    def create_error(error_code: str, message: str = "Test error", operation_name: str = "TestOperation"):
        return ClientError(
            error_response={
                "Error": {
                    "Code": error_code,
                    "Message": message,
                }
            },
            operation_name=operation_name,
        )

    return create_error


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "e2e" in str(item.fspath):
            item.add_marker(pytest.mark.e2e)
