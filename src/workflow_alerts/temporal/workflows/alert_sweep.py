"""
Workflow Alert Sweep.

Checks every active workflow for warning, urgent and overdue steps and sends
the alerts that are not held back by their cooldown. Run on a cron schedule
(hourly by default); completions trigger their own alert checks in between.
"""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from src.workflow_alerts.temporal.activities import run_alert_sweep


@workflow.defn
class WorkflowAlertSweepWorkflow:
    @workflow.run
    async def run(self) -> dict[str, int]:
        """
        Run one alert sweep.

        Returns:
            Sweep counters from the activity
        """
        workflow.logger.info("Starting workflow alert sweep")

        result = await workflow.execute_activity(
            run_alert_sweep,
            start_to_close_timeout=timedelta(minutes=10),
            retry_policy=RetryPolicy(
                maximum_attempts=3,
                initial_interval=timedelta(seconds=2),
            ),
        )

        workflow.logger.info(
            f"Alert sweep complete: {result['alerts_generated']} alerts generated, "
            f"{result['workflows_skipped']} workflows skipped"
        )
        return result
