"""
Router utility functions.

Contains helpers shared by router endpoints to keep them clean.
"""

from salesdesk.api.routers.router_utils.error_mapping import to_http_exception
from salesdesk.api.routers.router_utils.upload_utils import to_incoming_files

__all__ = [
    "to_http_exception",
    "to_incoming_files",
]
