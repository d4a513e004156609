"""Tests for structured logging context."""

from uuid import uuid4

import pytest
import structlog
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from structlog.testing import CapturingLogger

from src.workflow_alerts.api.middlewares import setup_middlewares
from src.workflow_alerts.core.logging import (
    bind_request_context,
    bind_workflow_context,
    clear_request_context,
    clear_workflow_context,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def capturing_logger():
    cap_logger = CapturingLogger()
    old_config = structlog.get_config()

    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args, **kwargs: cap_logger,
        cache_logger_on_first_use=False,
    )

    clear_request_context()
    yield cap_logger
    clear_request_context()
    structlog.configure(**old_config)


def test_bind_request_context(capturing_logger):
    bind_request_context("test-request-123")
    structlog.get_logger().info("test message")

    assert capturing_logger.calls[0].kwargs["request_id"] == "test-request-123"


def test_bind_request_context_with_none(capturing_logger):
    bind_request_context(None)
    structlog.get_logger().info("test message")

    assert "request_id" not in capturing_logger.calls[0].kwargs


def test_bind_workflow_context(capturing_logger):
    workflow_id, project_id = uuid4(), uuid4()

    bind_workflow_context(workflow_id, project_id)
    structlog.get_logger().info("test message")

    entry = capturing_logger.calls[0].kwargs
    assert entry["workflow_id"] == str(workflow_id)
    assert entry["project_id"] == str(project_id)


def test_clear_workflow_context_keeps_request_id(capturing_logger):
    bind_request_context("req-1")
    bind_workflow_context(uuid4(), uuid4())

    clear_workflow_context()
    structlog.get_logger().info("test message")

    entry = capturing_logger.calls[0].kwargs
    assert entry["request_id"] == "req-1"
    assert "workflow_id" not in entry
    assert "project_id" not in entry


def test_bind_request_context_with_route(capturing_logger):
    bind_request_context("req-2", "POST", "/api/v1/alerts/check")
    structlog.get_logger().info("test message")

    entry = capturing_logger.calls[0].kwargs
    assert entry["method"] == "POST"
    assert entry["path"] == "/api/v1/alerts/check"


async def test_middleware_binds_and_clears_request_context(capturing_logger):
    app = FastAPI()
    setup_middlewares(app)

    @app.get("/ping")
    async def ping() -> dict[str, str]:
        bind_workflow_context(uuid4())
        structlog.get_logger().info("inside request")
        return {"status": "ok"}

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/ping")
    structlog.get_logger().info("after request")

    inside, after = (call.kwargs for call in capturing_logger.calls)
    assert response.status_code == 200
    assert inside["request_id"] == response.headers["X-Request-ID"]
    assert inside["method"] == "GET"
    assert inside["path"] == "/ping"
    assert "workflow_id" in inside
    assert after == {"event": "after request"}
