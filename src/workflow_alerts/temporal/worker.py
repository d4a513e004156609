"""
Temporal Worker - Separate process from API.

Run with:
    uv run python -m src.workflow_alerts.temporal.worker
    uv run python -m src.workflow_alerts.temporal.worker --no-schedules  # don't register crons
"""

import argparse
import asyncio
from collections.abc import Sequence

import uvicorn
from fastapi import FastAPI
from temporalio.client import Client
from temporalio.worker import Worker

from src.workflow_alerts.core.alert_routing import get_alert_routing
from src.workflow_alerts.core.config import get_settings
from src.workflow_alerts.core.db import dispose_engine
from src.workflow_alerts.core.logging import get_logger, setup_logging
from src.workflow_alerts.core.redis import close_redis
from src.workflow_alerts.temporal.activities import (
    cleanup_alert_history,
    cleanup_orphaned_workflows,
    run_alert_sweep,
)
from src.workflow_alerts.temporal.client import connect_temporal, jobs_task_queue
from src.workflow_alerts.temporal.schedules import ensure_schedules
from src.workflow_alerts.temporal.workflows import (
    AlertMaintenanceWorkflow,
    WorkflowAlertSweepWorkflow,
)

logger = get_logger(__name__)

WORKER_HEALTH_PORT = 8001


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(description="Workflow alert worker")
    parser.add_argument(
        "--no-schedules",
        action="store_true",
        help="Do not register the alert sweep and maintenance cron workflows",
    )
    return parser.parse_args()


async def create_worker(
    client: Client,
    task_queue: str,
    workflows: Sequence[type],
    activities: Sequence[object],  # type: ignore[type-arg]
    *,
    max_concurrent_activities: int = 100,
    max_concurrent_workflow_tasks: int = 100,
) -> Worker:
    """Create a worker with tuned settings.

    Args:
        client: Temporal client
        task_queue: Task queue name
        workflows: List of workflow classes
        activities: List of activity functions
        max_concurrent_activities: Max concurrent activity executions
        max_concurrent_workflow_tasks: Max concurrent workflow task executions

    Returns:
        Configured Worker instance
    """
    return Worker(
        client,
        task_queue=task_queue,
        workflows=list(workflows),
        activities=list(activities),  # type: ignore[arg-type]
        max_concurrent_activities=max_concurrent_activities,
        max_concurrent_workflow_tasks=max_concurrent_workflow_tasks,
    )


async def run_jobs_worker(client: Client) -> None:
    """Run the worker for the jobs queue.

    Sweeps run one at a time per schedule, so concurrency stays low; the
    sweep itself processes workflows sequentially.
    """
    tq = jobs_task_queue()

    worker = await create_worker(
        client,
        tq,
        workflows=[WorkflowAlertSweepWorkflow, AlertMaintenanceWorkflow],
        activities=[run_alert_sweep, cleanup_alert_history, cleanup_orphaned_workflows],
        max_concurrent_activities=10,
        max_concurrent_workflow_tasks=10,
    )
    logger.info(f"Starting jobs worker on queue: {tq}")
    await worker.run()


async def run_health_server(task_queues: list[str], port: int = WORKER_HEALTH_PORT) -> None:
    """Run a lightweight health server for K8s liveness and readiness checks.

    Args:
        task_queues: List of task queues being polled
        port: Port to listen on
    """
    health_app = FastAPI(title="Workflow Alert Worker Health")

    @health_app.get("/health")
    async def health() -> dict[str, str | list[str]]:
        return {
            "status": "healthy",
            "service": "workflow-alert-worker",
            "task_queues": task_queues,
        }

    @health_app.get("/ready")
    async def ready() -> dict[str, str]:
        return {"status": "ready"}

    config = uvicorn.Config(
        health_app,
        host="0.0.0.0",
        port=port,
        log_level="warning",
    )
    server = uvicorn.Server(config)
    logger.info(f"Starting health server on port {port}")
    await server.serve()


async def main() -> None:
    """Main entry point for the Temporal worker."""
    args = parse_args()
    settings = get_settings()
    setup_logging(settings.debug)

    # Fail fast on a broken routing file
    get_alert_routing()

    client = await connect_temporal(settings)

    if not args.no_schedules:
        await ensure_schedules(client, settings)

    tq = jobs_task_queue(settings)
    logger.info(f"Polling task queue: {tq}")

    try:
        # Start health server alongside the worker
        health_task = asyncio.create_task(run_health_server([tq]))
        await run_jobs_worker(client)

        # Wait for health server to finish (should never happen)
        await health_task
    finally:
        await close_redis()
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
