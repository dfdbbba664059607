"""Tests for the health check endpoint."""
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession


async def test_health_endpoint_returns_healthy_status(anon_client: AsyncClient) -> None:
    """The health endpoint reports a reachable database."""
    response = await anon_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "healthy"}


async def test_health_endpoint_returns_security_headers(anon_client: AsyncClient) -> None:
    """Every response carries the security headers."""
    response = await anon_client.get("/health")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "max-age" in response.headers["Strict-Transport-Security"]


async def test_health_endpoint_returns_503_when_database_fails(
    anon_client: AsyncClient,
    db_session: AsyncSession,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A failing database check yields 503."""
    monkeypatch.setattr(
        db_session,
        "execute",
        AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("down"))),
    )

    response = await anon_client.get("/health")

    assert response.status_code == 503
    assert response.json()["database"] == "unhealthy"
