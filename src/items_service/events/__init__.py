"""
Item events: schema and queue publisher.
"""

from .event_publisher import ItemEventPublisher
from .event_schemas import ItemEvent, ItemEventType

__all__ = [
    'ItemEvent',
    'ItemEventType',
    'ItemEventPublisher',
]
