"""
Items Handler - API Gateway front end for item management.

ItemsApi registers the item routes on a Powertools APIGatewayRestResolver and
owns the error-to-status mapping. All collaborators are passed in, and
build_items_api wires the production ones from environment variables once per
process.
"""

import json
from typing import Any, Callable, Dict, Optional

from aws_lambda_powertools.event_handler import APIGatewayRestResolver, Response, content_types
from aws_lambda_powertools.event_handler.exceptions import NotFoundError
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from items_service.dal import get_item_store
from items_service.events.event_publisher import ItemEventPublisher
from items_service.handlers.models.env_vars import ItemsApiEnvVars, get_items_api_env_vars
from items_service.handlers.utils.errors import (
    BaseServiceError,
    ErrorContext,
    InternalServiceError,
    MalformedRequestError,
    create_error_context,
    format_error_response,
    get_http_status_code,
    log_error_metrics,
)
from items_service.handlers.utils.observability import logger, metrics, tracer
from items_service.logic.audit import AuditRecorder, AuditSink, DynamoDBAuditSink, LoggerAuditSink
from items_service.logic.item_service import ItemService
from items_service.models.input import CreateItemRequest

ITEMS_PATH = '/items'
HEALTH_PATH = '/health'

LambdaHandler = Callable[[Dict[str, Any], LambdaContext], Dict[str, Any]]


def _json_response(status_code: int, body: Any, headers: Optional[Dict[str, str]] = None) -> Response:
    return Response(
        status_code=status_code,
        content_type=content_types.APPLICATION_JSON,
        body=json.dumps(body),
        headers=headers,
    )


class ItemsApi:
    """REST front end for the items service."""

    def __init__(self, item_service: ItemService) -> None:
        self.item_service = item_service
        self.app = APIGatewayRestResolver()

        self.app.get(ITEMS_PATH)(self.list_items)
        self.app.get(f'{ITEMS_PATH}/<item_id>')(self.get_item)
        self.app.post(ITEMS_PATH)(self.create_item)
        self.app.delete(f'{ITEMS_PATH}/<item_id>')(self.delete_item)
        self.app.get(HEALTH_PATH)(self.health_check)

        self.app.not_found(self.handle_route_not_found)
        self.app.exception_handler(BaseServiceError)(self.handle_service_error)
        self.app.exception_handler(Exception)(self.handle_unexpected_error)

    def resolve(self, event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
        """Route an API Gateway event and return the proxy response."""
        return self.app.resolve(event, context)

    def _error_context(self, operation: str, resource_id: Optional[str] = None) -> ErrorContext:
        event = self.app.current_event
        request_context = event.raw_event.get('requestContext') or {}
        authorizer = request_context.get('authorizer') or {}

        return create_error_context(
            request_id=request_context.get('requestId', 'unknown'),
            operation=operation,
            user_id=authorizer.get('principalId'),
            resource_id=resource_id,
        )

    @tracer.capture_method
    def list_items(self) -> Response:
        logger.info("List items request received")

        items = self.item_service.list_items()

        logger.info("Items listed", extra={"items_count": len(items)})
        return _json_response(200, [item.to_wire() for item in items])

    @tracer.capture_method
    def get_item(self, item_id: str) -> Response:
        logger.info("Get item request received", extra={"item_id": item_id})
        context = self._error_context("get_item", resource_id=item_id)

        item = self.item_service.get_item(item_id, context=context)

        return _json_response(200, item.to_wire())

    @tracer.capture_method
    def create_item(self) -> Response:
        """
        Create a new item from the JSON request body.

        Returns:
            201 with the created item and a Location header
        """
        logger.info("Create item request received")
        context = self._error_context("create_item")

        request = self._parse_create_request(self._request_body(context), context)
        item = self.item_service.create_item(request, context)

        logger.info("Item created", extra={"item_id": item.id, "request_id": context.request_id})
        return _json_response(201, item.to_wire(), headers={"Location": f"{ITEMS_PATH}/{item.id}"})

    @tracer.capture_method
    def delete_item(self, item_id: str) -> Response:
        """
        Delete an item.

        Returns:
            204 with an empty body
        """
        logger.info("Delete item request received", extra={"item_id": item_id})
        context = self._error_context("delete_item", resource_id=item_id)

        self.item_service.delete_item(item_id, context)

        logger.info("Item deleted", extra={"item_id": item_id, "request_id": context.request_id})
        return Response(status_code=204, body=None)

    @tracer.capture_method
    def health_check(self) -> Response:
        health = self.item_service.store.health_check()
        status_code = 200 if health.get('status') == 'healthy' else 503

        metrics.add_metric(
            name="HealthCheckSuccess" if status_code == 200 else "HealthCheckFailure",
            unit=MetricUnit.Count,
            value=1,
        )
        return _json_response(status_code, health)

    def _request_body(self, context: ErrorContext) -> Optional[str]:
        # API Gateway base64-encodes binary media types
        try:
            return self.app.current_event.decoded_body
        except ValueError as e:
            raise MalformedRequestError("Request body is not valid base64-encoded UTF-8", context=context) from e

    def _parse_create_request(self, body: Optional[str], context: ErrorContext) -> CreateItemRequest:
        try:
            payload = json.loads(body or '')
        except json.JSONDecodeError as e:
            raise MalformedRequestError(f"Invalid JSON in request body: {e.msg}", context=context) from e

        if not isinstance(payload, dict):
            raise MalformedRequestError("Request body must be a JSON object", context=context)

        try:
            return CreateItemRequest.model_validate(payload)
        except ValidationError as e:
            field_errors = ", ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
            )
            raise MalformedRequestError(f"Invalid request body: {field_errors}", context=context) from e

    def handle_route_not_found(self, error: NotFoundError) -> Response:
        logger.info("Route not found", extra={
            "path": self.app.current_event.path,
            "http_method": self.app.current_event.http_method,
        })
        return _json_response(404, {"message": "Not found"})

    def handle_service_error(self, error: BaseServiceError) -> Response:
        log_error_metrics(error)
        return _json_response(get_http_status_code(error), format_error_response(error))

    def handle_unexpected_error(self, error: Exception) -> Response:
        logger.exception("Unexpected error in handler", extra={"error": str(error)})
        metrics.add_metric(name="UnexpectedError", unit=MetricUnit.Count, value=1)

        internal_error = InternalServiceError(f"Internal error: {error}")
        return _json_response(get_http_status_code(internal_error), format_error_response(internal_error))


def build_items_api(env_vars: Optional[ItemsApiEnvVars] = None) -> ItemsApi:
    """
    Wire the production collaborators from environment variables.

    Args:
        env_vars: Parsed configuration, read from the environment when omitted

    Returns:
        Ready-to-use ItemsApi
    """
    env_vars = env_vars or get_items_api_env_vars()

    store = get_item_store(env_vars.TABLE_NAME, endpoint_url=env_vars.DYNAMODB_ENDPOINT)
    publisher = ItemEventPublisher(queue_url=env_vars.EVENT_QUEUE_URL)

    sinks: list[AuditSink] = [LoggerAuditSink()]
    if env_vars.AUDIT_TABLE_NAME:
        sinks.append(DynamoDBAuditSink(env_vars.AUDIT_TABLE_NAME, endpoint_url=env_vars.DYNAMODB_ENDPOINT))

    logger.info("Items API configured", extra={
        "table_name": env_vars.TABLE_NAME,
        "queue_url": env_vars.EVENT_QUEUE_URL,
        "durable_audit": bool(env_vars.AUDIT_TABLE_NAME),
        "environment": env_vars.ENVIRONMENT,
    })

    return ItemsApi(ItemService(store=store, publisher=publisher, audit_recorder=AuditRecorder(sinks)))


def create_lambda_handler(api: ItemsApi) -> LambdaHandler:
    """
    Build the Lambda entry callable for an ItemsApi.

    Args:
        api: Configured API instance

    Returns:
        Lambda handler with logging, tracing and metrics attached
    """

    @tracer.capture_lambda_handler
    @logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
    @metrics.log_metrics(capture_cold_start_metric=True)
    def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
        metrics.add_metric(name="RequestCount", unit=MetricUnit.Count, value=1)
        return api.resolve(event, context)

    return lambda_handler
