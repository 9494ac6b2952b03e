"""
Item Events Lambda Function - Entry point for the item events SQS consumer.

The event source mapping delivers batches from the item events queue. A raised
exception fails the whole batch, which SQS then redelivers.
"""

import os
import sys

# Add the service module to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from items_service.handlers.events_handler import build_item_event_processor, create_lambda_handler

lambda_handler = create_lambda_handler(build_item_event_processor())
