"""
Items API Lambda Function - Entry point for the items REST API.

Collaborators are built once per execution environment at cold start and
reused by every invocation.
"""

import os
import sys

# Add the service module to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from items_service.handlers.items_handler import build_items_api, create_lambda_handler

lambda_handler = create_lambda_handler(build_items_api())
