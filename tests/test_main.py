from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "SUCCESS"
    assert "version" in response.json()["data"]


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["message"] == "API is healthy"
    assert response.json()["data"] == {"database": "ok"}


@pytest.mark.asyncio
async def test_health_reports_database_failure(client):
    failure = OperationalError("SELECT 1", {}, Exception("database is locked"))

    with patch.object(AsyncSession, "execute", side_effect=failure):
        response = await client.get("/health")

    assert response.status_code == 503
    assert response.json()["error"] == "DATA_ACCESS_ERROR"
