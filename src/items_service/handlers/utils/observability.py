"""
Centralized observability utilities for the items Lambda handlers.

Configured AWS Lambda Powertools instances for logging, tracing and metrics,
shared by the API handler, the event consumer and the layers below them.
"""

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import Metrics
from aws_lambda_powertools.tracing import Tracer

METRICS_NAMESPACE = 'ItemsService'

# Structured JSON lines; level follows LOG_LEVEL, service follows POWERTOOLS_SERVICE_NAME
logger: Logger = Logger()

# Disabled by setting POWERTOOLS_TRACE_DISABLED to "true"
tracer: Tracer = Tracer()

# Every metric from both functions lands in one namespace, dimensioned by service
metrics = Metrics(namespace=METRICS_NAMESPACE)
