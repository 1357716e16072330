"""
API test fixtures.

Routes are exercised through TestClient with service dependencies
overridden by AsyncMocks. The client is not entered as a context
manager, so the lifespan never builds model clients.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from salesdesk.api.deps import get_catalog_search_service, get_chat_service, get_document_service
from salesdesk.api.main import create_app


@pytest.fixture
def mock_document_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_search_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_chat_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def client(mock_document_service, mock_search_service, mock_chat_service) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_document_service] = lambda: mock_document_service
    app.dependency_overrides[get_catalog_search_service] = lambda: mock_search_service
    app.dependency_overrides[get_chat_service] = lambda: mock_chat_service
    return TestClient(app)
