"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_catalog_search_service,
    get_chat_service,
    get_document_service,
    get_service_container,
    get_settings_dependency,
)

__all__ = [
    "get_catalog_search_service",
    "get_chat_service",
    "get_document_service",
    "get_service_container",
    "get_settings_dependency",
]
