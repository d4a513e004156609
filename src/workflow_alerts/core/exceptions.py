"""Engine exceptions and exception handlers with request_id in responses."""

from uuid import UUID

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.workflow_alerts.core.logging import get_logger

logger = get_logger(__name__)


class WorkflowAlertError(Exception):
    """Base class for engine errors."""


class NotFoundError(WorkflowAlertError):
    """A workflow, step or sub-task referenced by a completion call does not exist."""


class WorkflowNotFoundError(NotFoundError):
    def __init__(self, workflow_id: UUID):
        super().__init__(f"Workflow {workflow_id} not found")
        self.workflow_id = workflow_id


class StepNotFoundError(NotFoundError):
    def __init__(self, step_id: str):
        super().__init__(f"Step {step_id} not found")
        self.step_id = step_id


class SubTaskNotFoundError(NotFoundError):
    def __init__(self, sub_task_id: str):
        super().__init__(f"Sub-task {sub_task_id} not found")
        self.sub_task_id = sub_task_id


class RecipientLookupError(WorkflowAlertError):
    """A store lookup made while resolving alert recipients failed."""

    def __init__(self, source: str, cause: Exception):
        super().__init__(f"{source} lookup failed: {cause}")
        self.source = source
        self.cause = cause


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
