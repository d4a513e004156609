"""Application middlewares."""

from asgi_correlation_id import CorrelationIdMiddleware, correlation_id
from fastapi import FastAPI, Request, Response
from starlette.middleware.base import RequestResponseEndpoint

from src.workflow_alerts.core.logging import bind_request_context, clear_request_context

__all__ = ["setup_middlewares"]


def setup_middlewares(app: FastAPI) -> None:
    """Configure all application middlewares.

    Middleware order matters - outermost middleware runs first.
    """

    # Request log context - request_id, method and path on every log line; the
    # workflow_id bound by completions and checks is dropped with it
    @app.middleware("http")
    async def _request_log_context(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        clear_request_context()
        bind_request_context(correlation_id.get(), request.method, request.url.path)
        try:
            return await call_next(request)
        finally:
            clear_request_context()

    # Correlation ID - generates/propagates X-Request-ID (added last, runs first)
    app.add_middleware(CorrelationIdMiddleware)
