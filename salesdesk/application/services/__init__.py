"""
Application services.
"""

from salesdesk.application.services.catalog_search_service import CatalogSearchService
from salesdesk.application.services.chat_service import SupportChatService
from salesdesk.application.services.document_service import DocumentService, IncomingFile

__all__ = ["CatalogSearchService", "DocumentService", "IncomingFile", "SupportChatService"]
