"""Tests for health check caching."""

from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient

from src.workflow_alerts.core.health import reset_health_cache
from src.workflow_alerts.main import create_app

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def clear_health_cache():
    reset_health_cache()
    yield
    reset_health_cache()


async def test_health_check_is_cached(mock_redis_unavailable):
    app = create_app()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        first = (await client.get("/health")).json()
        second = (await client.get("/health")).json()

    assert first["cached"] is False
    assert first["redis"] == "not_configured"
    assert second["cached"] is True
    assert second["cache_age_seconds"] < 10


async def test_health_cache_expires(mock_redis_unavailable):
    app = create_app()
    now = [0.0]

    with patch("src.workflow_alerts.core.health.time.time", lambda: now[0]):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as client:
            assert (await client.get("/health")).json()["cached"] is False
            now[0] = 5.0
            assert (await client.get("/health")).json()["cached"] is True
            now[0] = 11.0
            assert (await client.get("/health")).json()["cached"] is False
