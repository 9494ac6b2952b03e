"""
Input models for request parsing using Pydantic.

Parsing only checks shape and types. Business rules live in
items_service.models.validation and run after normalization.
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field


class CreateItemRequest(BaseModel):
    """Request model for creating a new item."""

    name: Annotated[str, Field(
        description='Display name of the item',
        examples=['Widget']
    )]

    id: Annotated[str | None, Field(
        default=None,
        description='Client-supplied identifier, generated when absent'
    )] = None

    description: Annotated[str | None, Field(
        default=None,
        description='Optional free-text description'
    )] = None

    created_at: Annotated[datetime | None, Field(
        default=None,
        description='Creation timestamp, defaults to the time of the request'
    )] = None

    classification: Annotated[str | None, Field(
        default=None,
        description='Classification level, defaults to INTERNAL',
        examples=['PUBLIC', 'INTERNAL']
    )] = None
