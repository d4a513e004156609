"""Temporal connection settings shared by the worker and schedule registration."""

from temporalio.client import Client

from src.workflow_alerts.core.config import Settings, get_settings
from src.workflow_alerts.core.logging import get_logger

logger = get_logger(__name__)


def jobs_task_queue(settings: Settings | None = None) -> str:
    """Queue carrying the alert sweep and maintenance jobs: `{prefix}.jobs`."""
    settings = settings or get_settings()
    return f"{settings.temporal_queue_prefix}.jobs"


async def connect_temporal(settings: Settings | None = None) -> Client:
    """Connect to the configured Temporal namespace."""
    settings = settings or get_settings()
    client = await Client.connect(settings.temporal_host, namespace=settings.temporal_namespace)
    logger.info(
        "Connected to Temporal",
        host=settings.temporal_host,
        namespace=settings.temporal_namespace,
    )
    return client
