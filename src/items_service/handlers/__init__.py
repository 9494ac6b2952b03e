"""
AWS Lambda Handlers Module.

Entry-point wiring for the two functions of the service:

- items_handler: REST API for item management, served through API Gateway
- events_handler: SQS consumer for item mutation events

Handlers own request/response translation and error-to-status mapping; the
logic layer owns ordering of side effects.
"""

from items_service.handlers.utils.observability import logger, tracer, metrics

__all__ = [
    "logger",
    "tracer",
    "metrics",
]
