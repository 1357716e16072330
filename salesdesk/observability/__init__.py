"""
Observability module.

Provides logging configuration, structured logging helpers and
request logging middleware.
"""

from salesdesk.observability.logger import configure_logging

__all__ = ["configure_logging"]
