"""
Data Access Layer (DAL) for the items service.

This module provides the store interface the logic layer depends on and the
factory entry points use to build the concrete DynamoDB implementation.
"""

from typing import Optional, Protocol, runtime_checkable

from items_service.models.item import Item


@runtime_checkable
class ItemStore(Protocol):
    """Protocol defining the item persistence interface."""

    def create(self, item: Item) -> None:
        """Persist a new item."""
        ...

    def get(self, item_id: str) -> Optional[Item]:
        """Retrieve an item by its ID, None when absent."""
        ...

    def list(self) -> list[Item]:
        """Return every stored item, unordered."""
        ...

    def delete(self, item_id: str) -> None:
        """Delete an item by its ID, succeeding whether or not it exists."""
        ...

    def health_check(self) -> dict[str, str]:
        """Perform a health check on the data store."""
        ...


def get_item_store(table_name: str, endpoint_url: Optional[str] = None) -> ItemStore:
    """
    Factory function to get the item store.

    Args:
        table_name: Name of the database table
        endpoint_url: Optional endpoint override for local testing

    Returns:
        Item store instance
    """
    # Import here to avoid circular imports
    from items_service.dal.dynamodb_handler import DynamoDBItemStore

    return DynamoDBItemStore(table_name, endpoint_url=endpoint_url)


__all__ = [
    'ItemStore',
    'get_item_store',
]
