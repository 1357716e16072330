from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.api.main import create_app
from salesdesk.boundary.db import get_async_db


@pytest.fixture
def db_session() -> AsyncMock:
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def client(db_session):
    app = create_app()

    async def _db():
        yield db_session

    app.dependency_overrides[get_async_db] = _db
    return TestClient(app)


def test_health_check(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Server Healthy"}


def test_health_check_db(client, db_session):
    response = client.get("/api/v1/health/db")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Database connection OK"}
    db_session.execute.assert_awaited_once()


def test_health_check_db_unavailable(client, db_session):
    db_session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))

    response = client.get("/api/v1/health/db")

    assert response.status_code == 503
    assert response.json()["detail"] == "Database connection failed"


def test_request_id_is_echoed(client):
    response = client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


def test_request_id_is_generated(client):
    response = client.get("/api/v1/health")

    assert len(response.headers["X-Request-ID"]) == 32
