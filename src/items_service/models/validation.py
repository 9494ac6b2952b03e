"""
Item validation rules.

Rules run in a fixed order and the first failure wins, so a caller always sees
the same reason for the same item.
"""

from items_service.handlers.utils.errors import ItemValidationError, ValidationFailure
from items_service.models.item import Classification, Item

MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 1000
FORBIDDEN_CHARACTERS = frozenset('<>&')

_VALID_CLASSIFICATIONS = frozenset(level.value for level in Classification)


def _has_forbidden_characters(value: str) -> bool:
    return any(char in FORBIDDEN_CHARACTERS for char in value)


def validate_item(item: Item) -> None:
    """
    Validate an item against the service rules.

    Args:
        item: Normalized item to check

    Raises:
        ItemValidationError: On the first rule the item breaks
    """
    if not item.name:
        raise ItemValidationError(ValidationFailure.EMPTY_NAME, 'Item name cannot be empty')

    if len(item.name) > MAX_NAME_LENGTH:
        raise ItemValidationError(
            ValidationFailure.NAME_TOO_LONG,
            f'Item name cannot exceed {MAX_NAME_LENGTH} characters',
        )

    if _has_forbidden_characters(item.name):
        raise ItemValidationError(
            ValidationFailure.INVALID_NAME_CHARS,
            'Item name contains invalid characters (<, >, &)',
        )

    if item.description is not None:
        if len(item.description) > MAX_DESCRIPTION_LENGTH:
            raise ItemValidationError(
                ValidationFailure.DESCRIPTION_TOO_LONG,
                f'Item description cannot exceed {MAX_DESCRIPTION_LENGTH} characters',
            )
        if _has_forbidden_characters(item.description):
            raise ItemValidationError(
                ValidationFailure.INVALID_DESCRIPTION_CHARS,
                'Item description contains invalid characters (<, >, &)',
            )

    if item.classification not in _VALID_CLASSIFICATIONS:
        raise ItemValidationError(
            ValidationFailure.INVALID_CLASSIFICATION,
            f'Invalid classification: {item.classification}',
        )
