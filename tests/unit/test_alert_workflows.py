"""Tests for the alert sweep and maintenance Temporal workflows."""

import uuid

import pytest
from temporalio import activity
from temporalio.testing import WorkflowEnvironment
from temporalio.worker import Worker

from src.workflow_alerts.temporal.workflows import (
    AlertMaintenanceWorkflow,
    WorkflowAlertSweepWorkflow,
)

pytestmark = pytest.mark.unit

TASK_QUEUE = "test-alerts"


@activity.defn(name="run_alert_sweep")
async def fake_run_alert_sweep() -> dict[str, int]:
    return {
        "workflows_checked": 3,
        "alerts_generated": 4,
        "workflows_skipped": 1,
        "orphans_removed": 1,
        "workflows_failed": 0,
    }


retention_seen: list[int] = []


@activity.defn(name="cleanup_alert_history")
async def fake_cleanup_alert_history(retention_days: int) -> int:
    retention_seen.append(retention_days)
    return 6


@activity.defn(name="cleanup_orphaned_workflows")
async def fake_cleanup_orphaned_workflows() -> int:
    return 2


class TestAlertWorkflows:
    async def test_sweep_returns_activity_counters(self) -> None:
        async with await WorkflowEnvironment.start_time_skipping() as env:  # noqa: SIM117
            async with Worker(
                env.client,
                task_queue=TASK_QUEUE,
                workflows=[WorkflowAlertSweepWorkflow],
                activities=[fake_run_alert_sweep],
            ):
                result = await env.client.execute_workflow(
                    WorkflowAlertSweepWorkflow.run,
                    id=f"sweep-{uuid.uuid4()}",
                    task_queue=TASK_QUEUE,
                )

        assert result["alerts_generated"] == 4
        assert result["workflows_skipped"] == 1

    async def test_maintenance_runs_both_cleanups(self) -> None:
        retention_seen.clear()
        async with await WorkflowEnvironment.start_time_skipping() as env:  # noqa: SIM117
            async with Worker(
                env.client,
                task_queue=TASK_QUEUE,
                workflows=[AlertMaintenanceWorkflow],
                activities=[fake_cleanup_alert_history, fake_cleanup_orphaned_workflows],
            ):
                result = await env.client.execute_workflow(
                    AlertMaintenanceWorkflow.run,
                    3,
                    id=f"maintenance-{uuid.uuid4()}",
                    task_queue=TASK_QUEUE,
                )

        assert result == {"alert_history": 6, "orphaned_workflows": 2}
        assert retention_seen == [3]
