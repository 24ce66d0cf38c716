"""Tests for health check endpoints."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


class TestHealthEndpoint:
    """Tests for the basic health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_200(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_health_returns_correct_structure(self, client: AsyncClient) -> None:
        data = (await client.get("/health")).json()

        assert data["status"] == "healthy"
        assert data["service"] == "Funnelhub API"
        assert data["version"] == "1.0.0"
        assert "timestamp" in data
        assert "environment" in data
        assert data["database"] is None

    @pytest.mark.asyncio
    async def test_health_carries_request_id(self, client: AsyncClient) -> None:
        response = await client.get("/health", headers={"X-Request-ID": "probe-1"})

        assert response.headers["x-request-id"] == "probe-1"


class TestDetailedHealthEndpoint:
    """Tests for the database-aware health check."""

    @pytest.fixture
    def app_with_session(self):
        from infrastructure.database.session import get_async_session
        from main import create_app

        app = create_app()

        def _override(session: object) -> None:
            async def _get_session():
                yield session

            app.dependency_overrides[get_async_session] = _get_session

        yield app, _override
        app.dependency_overrides.clear()

    @pytest.mark.asyncio
    async def test_healthy_database(
        self, app_with_session, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        app, override = app_with_session
        async with session_factory() as session:
            override(session)
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as c:
                data = (await c.get("/health/detailed")).json()

        assert data["status"] == "healthy"
        assert data["database"] == "healthy"

    @pytest.mark.asyncio
    async def test_unreachable_database_is_degraded(self, app_with_session) -> None:
        app, override = app_with_session
        session = AsyncMock()
        session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))
        override(session)

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.get("/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["database"] == "unhealthy: OperationalError"
