"""Tests for the application surface: health, metrics and error responses."""

from collections.abc import AsyncGenerator
from unittest.mock import patch
from uuid import uuid4

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.marketplace.core.config import get_settings
from src.marketplace.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    PersistenceFailureError,
    UnauthorizedError,
)
from src.marketplace.core.health import reset_health_cache
from src.marketplace.main import create_app

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def clear_health_cache():
    reset_health_cache()
    yield
    reset_health_cache()


@pytest.fixture
def use_engine(monkeypatch: pytest.MonkeyPatch):
    """Point the application's engine singleton at a given engine."""

    def _use(engine: AsyncEngine) -> None:
        monkeypatch.setattr("src.marketplace.core.db.engine._engine", engine)

    return _use


async def _client(app: FastAPI) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
async def api() -> AsyncGenerator[AsyncClient]:
    app = create_app()

    errors = {
        "unauthorized": UnauthorizedError("TokenExpired", "Token expired"),
        "forbidden": ForbiddenError("NotProjectOwner", "Only the project owner can do this"),
        "not-found": NotFoundError("Project", "Project not found"),
        "invalid-state": InvalidStateError("ProjectNotOpen", "Project is not open"),
        "conflict": ConflictError("DuplicateProposal", "Duplicate proposal"),
        "persistence": PersistenceFailureError(),
    }

    @app.get("/boom/{name}")
    async def boom(name: str) -> None:
        raise errors[name]

    async with await _client(app) as client:
        yield client


class TestHealth:
    async def test_healthy_database(self, engine: AsyncEngine, use_engine):
        use_engine(engine)

        async with await _client(create_app()) as client:
            first = await client.get("/health")
            second = await client.get("/health")

        assert first.status_code == 200
        assert first.json()["database"] == "healthy"
        assert first.json()["cached"] is False
        assert second.json()["cached"] is True

    async def test_unreachable_database(self, use_engine, tmp_path):
        broken = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'nowhere.db'}"
        )
        use_engine(broken)

        async with await _client(create_app()) as client:
            response = await client.get("/health")
        await broken.dispose()

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
        assert response.json()["database"].startswith("unhealthy")

    async def test_cache_expires(self, engine: AsyncEngine, use_engine):
        use_engine(engine)

        class Clock:
            now = 0.0

            def __call__(self) -> float:
                return self.now

        clock = Clock()
        responses = []
        with patch("src.marketplace.core.health.time.time", clock):
            async with await _client(create_app()) as client:
                for now in (0.0, 1.0, 11.0):
                    clock.now = now
                    responses.append(await client.get("/health"))

        assert [r.json()["cached"] for r in responses] == [False, True, False]


class TestMetrics:
    async def test_metrics_open_without_key(self):
        async with await _client(create_app()) as client:
            response = await client.get("/metrics")

        assert response.status_code == 200

    async def test_metrics_key_required_when_configured(self, monkeypatch):
        monkeypatch.setenv("METRICS_API_KEY", "scrape-key")
        get_settings.cache_clear()
        try:
            app = create_app()
        finally:
            monkeypatch.delenv("METRICS_API_KEY")
            get_settings.cache_clear()

        async with await _client(app) as client:
            missing = await client.get("/metrics")
            wrong = await client.get("/metrics", headers={"X-Metrics-Key": "nope"})
            right = await client.get("/metrics", headers={"X-Metrics-Key": "scrape-key"})

        assert missing.status_code == 401
        assert wrong.status_code == 401
        assert right.status_code == 200


class TestErrorResponses:
    @pytest.mark.parametrize(
        ("name", "status_code", "kind", "code"),
        [
            ("unauthorized", 401, "unauthorized", "TokenExpired"),
            ("forbidden", 403, "forbidden", "NotProjectOwner"),
            ("not-found", 404, "not_found", "Project"),
            ("invalid-state", 400, "invalid_state", "ProjectNotOpen"),
            ("conflict", 400, "conflict", "DuplicateProposal"),
            ("persistence", 503, "persistence_failure", "PersistenceFailure"),
        ],
    )
    async def test_failure_kinds_map_to_status(
        self, api: AsyncClient, name, status_code, kind, code
    ):
        response = await api.get(f"/boom/{name}")

        assert response.status_code == status_code
        body = response.json()
        assert body["kind"] == kind
        assert body["code"] == code
        assert body["detail"]
        assert body["request_id"]

    async def test_request_id_is_propagated(self, api: AsyncClient):
        request_id = str(uuid4())

        response = await api.get("/boom/forbidden", headers={"X-Request-ID": request_id})

        assert response.json()["request_id"] == request_id
        assert response.headers["X-Request-ID"] == request_id

    async def test_unknown_route_includes_request_id(self, api: AsyncClient):
        response = await api.get("/no-such-endpoint")

        assert response.status_code == 404
        data = response.json()
        assert data["detail"] == "Not Found"
        assert isinstance(data["request_id"], str)
