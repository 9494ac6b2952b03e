"""
Item domain model.

This module defines the Item entity managed by the service, its classification
levels and the post-parse normalization step that fills generated defaults.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from items_service.models.input import CreateItemRequest


class Classification(str, Enum):
    """Data classification levels an item can carry."""

    PUBLIC = 'PUBLIC'
    INTERNAL = 'INTERNAL'
    CONFIDENTIAL = 'CONFIDENTIAL'
    RESTRICTED = 'RESTRICTED'


DEFAULT_CLASSIFICATION = Classification.INTERNAL


class Item(BaseModel):
    """Core Item domain model."""

    id: Annotated[str, Field(
        description='Unique identifier for the item',
        examples=['550e8400-e29b-41d4-a716-446655440000']
    )]

    name: Annotated[str, Field(
        description='Display name of the item',
        examples=['Widget']
    )]

    description: Annotated[Optional[str], Field(
        default=None,
        description='Optional free-text description'
    )] = None

    created_at: Annotated[datetime, Field(
        description='UTC timestamp when the item was created'
    )]

    # Held as a plain string so out-of-range values reach validate_item
    classification: Annotated[str, Field(
        default=DEFAULT_CLASSIFICATION.value,
        description='One of PUBLIC, INTERNAL, CONFIDENTIAL, RESTRICTED'
    )] = DEFAULT_CLASSIFICATION.value

    def to_wire(self) -> Dict[str, Any]:
        """
        Convert the item to its JSON wire shape.

        Absent optional fields are omitted rather than emitted as null.

        Returns:
            JSON-ready dictionary representation of the item
        """
        data: Dict[str, Any] = {
            'id': self.id,
            'name': self.name,
            'created_at': self.created_at.isoformat(),
            'classification': self.classification,
        }
        if self.description is not None:
            data['description'] = self.description
        return data

    def to_json(self) -> str:
        """Canonical serialized form used for audit snapshots and hashing."""
        return json.dumps(self.to_wire(), sort_keys=True, separators=(',', ':'))

    class Config:
        """Pydantic configuration."""

        json_schema_extra = {
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "name": "Widget",
                "description": "A small widget",
                "created_at": "2024-01-15T10:30:00+00:00",
                "classification": "INTERNAL",
            }
        }


def ensure_utc(value: datetime) -> datetime:
    """Return value as an aware UTC datetime, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def normalize_item(request: CreateItemRequest) -> Item:
    """
    Build an Item from a parsed create request, filling generated defaults.

    Args:
        request: Parsed request body

    Returns:
        Item with id, created_at and classification always present
    """
    return Item(
        id=request.id or str(uuid4()),
        name=request.name,
        description=request.description,
        created_at=ensure_utc(request.created_at) if request.created_at else datetime.now(timezone.utc),
        classification=request.classification if request.classification is not None else DEFAULT_CLASSIFICATION.value,
    )
