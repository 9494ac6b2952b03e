"""
Service Models Package

Pydantic models for request parsing and the Item domain model, plus the
validation rules applied after normalization.
"""

from .input import CreateItemRequest
from .item import Classification, DEFAULT_CLASSIFICATION, Item, normalize_item
from .validation import MAX_DESCRIPTION_LENGTH, MAX_NAME_LENGTH, validate_item

__all__ = [
    # Input models
    "CreateItemRequest",

    # Domain models
    "Classification",
    "DEFAULT_CLASSIFICATION",
    "Item",
    "normalize_item",

    # Validation
    "MAX_DESCRIPTION_LENGTH",
    "MAX_NAME_LENGTH",
    "validate_item",
]
