"""Alert sweep and maintenance activities."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import asdict

from temporalio import activity

from src.workflow_alerts.core.db import get_session
from src.workflow_alerts.repositories import (
    NotificationRepository,
    ProjectRepository,
    UserRepository,
    WorkflowRepository,
)
from src.workflow_alerts.services import (
    NotificationService,
    RecipientResolver,
    WorkflowAlertService,
    get_alert_history,
)


@asynccontextmanager
async def _alert_service() -> AsyncGenerator[WorkflowAlertService]:
    """Alert service wired to fresh sessions; notifications get their own."""
    async with get_session() as session, get_session() as notification_session:
        yield WorkflowAlertService(
            session,
            WorkflowRepository(session),
            ProjectRepository(session),
            RecipientResolver(UserRepository(session)),
            await get_alert_history(),
            NotificationService(NotificationRepository(notification_session), notification_session),
        )


@activity.defn
async def run_alert_sweep() -> dict[str, int]:
    """
    Check every active workflow and send due alerts.

    Safe to retry: steps alerted before a failure are held back by their
    cooldown on the next attempt.

    Returns:
        Sweep counters (workflows_checked, alerts_generated, ...)
    """
    activity.logger.info("Running workflow alert sweep")

    async with _alert_service() as service:
        summary = await service.check_and_send_alerts()

    activity.logger.info(
        f"Alert sweep done: {summary.alerts_generated} alerts, "
        f"{summary.workflows_skipped} workflows skipped"
    )
    return asdict(summary)


@activity.defn
async def cleanup_alert_history(retention_days: int) -> int:
    """
    Drop alert history older than retention_days, whatever the tier.

    Args:
        retention_days: Number of days of alert history to keep

    Returns:
        Number of records removed (always 0 with the Redis backend, which
        expires records itself)
    """
    activity.logger.info(f"Cleaning up alert history older than {retention_days} days")

    async with _alert_service() as service:
        count = await service.cleanup_alert_history(retention_days)

    activity.logger.info(f"Removed {count} alert history records")
    return count


@activity.defn
async def cleanup_orphaned_workflows() -> int:
    """
    Delete workflows whose project no longer exists.

    Idempotent: a second run finds nothing to delete.

    Returns:
        Number of workflows deleted
    """
    activity.logger.info("Cleaning up orphaned workflows")

    async with _alert_service() as service:
        count = await service.cleanup_orphaned_workflows()

    activity.logger.info(f"Deleted {count} orphaned workflows")
    return count
