"""Tests for the jobs queue and cron registration."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from temporalio.exceptions import WorkflowAlreadyStartedError

from src.workflow_alerts.core.config import Settings
from src.workflow_alerts.temporal.client import jobs_task_queue
from src.workflow_alerts.temporal.schedules import (
    ALERT_MAINTENANCE_WORKFLOW_ID,
    ALERT_SWEEP_WORKFLOW_ID,
    ensure_schedules,
)
from src.workflow_alerts.temporal.workflows import (
    AlertMaintenanceWorkflow,
    WorkflowAlertSweepWorkflow,
)

pytestmark = pytest.mark.unit


def already_started(workflow_id: str) -> WorkflowAlreadyStartedError:
    return WorkflowAlreadyStartedError(workflow_id, "CronWorkflow")


def make_client(*, running_cron: str | None = None) -> MagicMock:
    """Client whose running jobs report `running_cron` in their memo."""
    client = MagicMock()
    client.start_workflow = AsyncMock()
    description = MagicMock()
    description.memo_value = AsyncMock(return_value=running_cron)
    handle = MagicMock()
    handle.describe = AsyncMock(return_value=description)
    handle.terminate = AsyncMock()
    client.get_workflow_handle.return_value = handle
    return client


class TestJobsTaskQueue:
    def test_uses_prefix(self):
        assert jobs_task_queue(Settings(temporal_queue_prefix="alerts-eu")) == "alerts-eu.jobs"

    def test_default_prefix(self):
        assert jobs_task_queue(Settings()) == "workflow-alerts.jobs"


class TestEnsureSchedules:
    async def test_starts_both_cron_workflows(self):
        client = make_client()
        settings = Settings(alert_history_retention_days=5)

        started = await ensure_schedules(client, settings)

        assert started == [ALERT_SWEEP_WORKFLOW_ID, ALERT_MAINTENANCE_WORKFLOW_ID]
        sweep_call, maintenance_call = client.start_workflow.await_args_list
        assert sweep_call.args == (WorkflowAlertSweepWorkflow.run,)
        assert sweep_call.kwargs["id"] == ALERT_SWEEP_WORKFLOW_ID
        assert sweep_call.kwargs["cron_schedule"] == "0 * * * *"
        assert sweep_call.kwargs["memo"] == {"cron_schedule": "0 * * * *"}
        assert sweep_call.kwargs["task_queue"] == "workflow-alerts.jobs"
        assert maintenance_call.args == (AlertMaintenanceWorkflow.run,)
        assert maintenance_call.kwargs["args"] == [5]
        assert maintenance_call.kwargs["cron_schedule"] == "0 0 * * *"

    async def test_running_job_with_same_cron_is_left_alone(self):
        client = make_client(running_cron="0 * * * *")
        client.start_workflow.side_effect = [already_started(ALERT_SWEEP_WORKFLOW_ID), None]

        started = await ensure_schedules(client, Settings())

        assert started == [ALERT_MAINTENANCE_WORKFLOW_ID]
        client.get_workflow_handle.assert_called_once_with(ALERT_SWEEP_WORKFLOW_ID)
        client.get_workflow_handle.return_value.terminate.assert_not_awaited()

    async def test_changed_cron_restarts_running_job(self):
        client = make_client(running_cron="0 * * * *")
        client.start_workflow.side_effect = [
            already_started(ALERT_SWEEP_WORKFLOW_ID),
            None,
            None,
        ]

        started = await ensure_schedules(
            client, Settings(alert_sweep_schedule="*/15 * * * *", maintenance_schedule="")
        )

        assert started == [ALERT_SWEEP_WORKFLOW_ID]
        client.get_workflow_handle.return_value.terminate.assert_awaited_once()
        restart = client.start_workflow.await_args_list[-1]
        assert restart.kwargs["cron_schedule"] == "*/15 * * * *"
        assert restart.kwargs["memo"] == {"cron_schedule": "*/15 * * * *"}

    async def test_job_without_recorded_cron_is_restarted(self):
        client = make_client(running_cron=None)
        client.start_workflow.side_effect = [already_started(ALERT_MAINTENANCE_WORKFLOW_ID), None]

        started = await ensure_schedules(client, Settings(alert_sweep_schedule=""))

        assert started == [ALERT_MAINTENANCE_WORKFLOW_ID]
        client.get_workflow_handle.return_value.terminate.assert_awaited_once()
        assert client.start_workflow.await_count == 2

    async def test_empty_schedule_disables_job(self):
        client = make_client()

        started = await ensure_schedules(client, Settings(alert_sweep_schedule=""))

        assert started == [ALERT_MAINTENANCE_WORKFLOW_ID]
        assert client.start_workflow.await_count == 1
