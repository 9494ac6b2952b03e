"""
Environment variable models for type-safe configuration.

Each Lambda entry point reads its configuration once at cold start through
these models, so a misconfigured deployment fails fast with a validation error.
"""

from typing import Annotated, Optional

from aws_lambda_env_modeler import BaseModel as BaseEnvModel, get_environment_variables
from pydantic import Field


class CommonEnvVars(BaseEnvModel):
    """Environment variables shared by both functions."""

    # Environment name (dev, test, staging, prod)
    ENVIRONMENT: Annotated[str, Field(
        default='dev',
        description='Deployment environment name',
        pattern=r'^(dev|test|staging|prod)$'
    )] = 'dev'

    # Log level for AWS Powertools Logger
    LOG_LEVEL: Annotated[str, Field(
        default='INFO',
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'

    # Service name for observability
    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        default='items-service',
        description='Service name for AWS Powertools'
    )] = 'items-service'

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == 'prod'


class ItemsApiEnvVars(CommonEnvVars):
    """Environment variables for the items API function."""

    # DynamoDB table holding items, keyed by "id"
    TABLE_NAME: Annotated[str, Field(
        description='DynamoDB table name for item storage',
        min_length=1
    )]

    # SQS queue receiving item events
    EVENT_QUEUE_URL: Annotated[str, Field(
        description='SQS queue URL for item events',
        min_length=1
    )]

    # Durable audit trail, log-only when unset
    AUDIT_TABLE_NAME: Annotated[Optional[str], Field(
        default=None,
        description='DynamoDB table name for audit records'
    )] = None

    # For local testing against DynamoDB Local
    DYNAMODB_ENDPOINT: Annotated[Optional[str], Field(
        default=None,
        description='DynamoDB endpoint URL override'
    )] = None


class ItemEventsEnvVars(CommonEnvVars):
    """Environment variables for the item events consumer function."""

    EVENT_PROCESSING_DELAY_MS: Annotated[int, Field(
        default=100,
        description='Simulated processing time per event in milliseconds',
        ge=0,
        le=5000
    )] = 100


def get_items_api_env_vars() -> ItemsApiEnvVars:
    """Get typed environment variables for the items API function."""
    return get_environment_variables(model=ItemsApiEnvVars)


def get_item_events_env_vars() -> ItemEventsEnvVars:
    """Get typed environment variables for the item events function."""
    return get_environment_variables(model=ItemEventsEnvVars)
