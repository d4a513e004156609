"""Cron registration for the alert engine's recurring workflows.

Each job runs under a fixed workflow id and records its cron expression in
the workflow memo. Registering again is a no-op while the running job has
the configured cron; when the configured cron has changed, the running job
is terminated and started again under the new one.
"""

from temporalio.client import Client
from temporalio.exceptions import WorkflowAlreadyStartedError

from src.workflow_alerts.core.config import Settings, get_settings
from src.workflow_alerts.core.logging import get_logger
from src.workflow_alerts.temporal.client import jobs_task_queue
from src.workflow_alerts.temporal.workflows import (
    AlertMaintenanceWorkflow,
    WorkflowAlertSweepWorkflow,
)

logger = get_logger(__name__)

ALERT_SWEEP_WORKFLOW_ID = "workflow-alert-sweep"
ALERT_MAINTENANCE_WORKFLOW_ID = "workflow-alert-maintenance"
CRON_MEMO_KEY = "cron_schedule"


async def ensure_schedules(client: Client, settings: Settings | None = None) -> list[str]:
    """Start the enabled cron workflows that are missing or on an outdated cron.

    Returns:
        Workflow ids started (or restarted) by this call
    """
    settings = settings or get_settings()
    task_queue = jobs_task_queue(settings)
    started = []

    if settings.alert_sweep_schedule:
        if await _ensure_cron(
            client,
            WorkflowAlertSweepWorkflow.run,
            [],
            workflow_id=ALERT_SWEEP_WORKFLOW_ID,
            task_queue=task_queue,
            cron_schedule=settings.alert_sweep_schedule,
        ):
            started.append(ALERT_SWEEP_WORKFLOW_ID)
    else:
        logger.info("Alert sweep schedule disabled")

    if settings.maintenance_schedule:
        if await _ensure_cron(
            client,
            AlertMaintenanceWorkflow.run,
            [settings.alert_history_retention_days],
            workflow_id=ALERT_MAINTENANCE_WORKFLOW_ID,
            task_queue=task_queue,
            cron_schedule=settings.maintenance_schedule,
        ):
            started.append(ALERT_MAINTENANCE_WORKFLOW_ID)
    else:
        logger.info("Alert maintenance schedule disabled")

    return started


async def _ensure_cron(
    client: Client,
    run,  # type: ignore[no-untyped-def]
    args: list[object],
    *,
    workflow_id: str,
    task_queue: str,
    cron_schedule: str,
) -> bool:
    try:
        await _start_cron(client, run, args, workflow_id, task_queue, cron_schedule)
        return True
    except WorkflowAlreadyStartedError:
        pass

    handle = client.get_workflow_handle(workflow_id)
    description = await handle.describe()
    running_cron = await description.memo_value(CRON_MEMO_KEY, None)
    if running_cron == cron_schedule:
        logger.info("Schedule already registered", workflow_id=workflow_id)
        return False

    logger.warning(
        "Schedule changed, re-registering",
        workflow_id=workflow_id,
        running_cron=running_cron,
        cron_schedule=cron_schedule,
    )
    await handle.terminate(reason=f"cron schedule changed to '{cron_schedule}'")
    await _start_cron(client, run, args, workflow_id, task_queue, cron_schedule)
    return True


async def _start_cron(
    client: Client,
    run,  # type: ignore[no-untyped-def]
    args: list[object],
    workflow_id: str,
    task_queue: str,
    cron_schedule: str,
) -> None:
    await client.start_workflow(
        run,
        args=args,
        id=workflow_id,
        task_queue=task_queue,
        cron_schedule=cron_schedule,
        memo={CRON_MEMO_KEY: cron_schedule},
    )
    logger.info(
        "Schedule registered",
        workflow_id=workflow_id,
        cron_schedule=cron_schedule,
        task_queue=task_queue,
    )
