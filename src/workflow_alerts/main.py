from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.workflow_alerts.api.middlewares import setup_middlewares
from src.workflow_alerts.api.v1.router import api_router
from src.workflow_alerts.core.alert_routing import get_alert_routing
from src.workflow_alerts.core.config import get_settings
from src.workflow_alerts.core.db import dispose_engine
from src.workflow_alerts.core.exceptions import setup_exception_handlers
from src.workflow_alerts.core.health import setup_health_endpoint, setup_metrics
from src.workflow_alerts.core.logging import get_logger, setup_logging
from src.workflow_alerts.core.redis import close_redis

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}")

    # Fail fast on a broken routing file rather than on the first alert
    get_alert_routing()

    yield

    logger.info("Closing connections...")
    await close_redis()
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "alerts", "description": "Due-date alert sweeps and alert history"},
    {"name": "workflows", "description": "Step and sub-task completion"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Workflow alert and progression engine",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    setup_exception_handlers(app)
    setup_middlewares(app)

    app.include_router(api_router)

    setup_health_endpoint(app)
    setup_metrics(app)

    return app


app = create_app()
