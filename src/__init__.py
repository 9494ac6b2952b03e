"""
Items Service - Source Package

Serverless item lifecycle pipeline: a REST API that validates, stores, audits
and publishes item mutations, and an SQS consumer for the published events.
"""

__version__ = "1.0.0"

# Package metadata
__all__ = [
    "__version__",
]
