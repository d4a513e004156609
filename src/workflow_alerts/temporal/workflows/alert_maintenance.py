"""
Alert Maintenance Workflow.

Daily housekeeping for the alert engine:
1. Alert history older than the retention window
2. Workflows whose project has been deleted

Idempotent: both cleanups delete only what is stale - safe to run multiple
times without side effects.
"""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from src.workflow_alerts.temporal.activities import (
        cleanup_alert_history,
        cleanup_orphaned_workflows,
    )


@workflow.defn
class AlertMaintenanceWorkflow:
    @workflow.run
    async def run(self, retention_days: int = 7) -> dict[str, int]:
        """
        Run both cleanups.

        Args:
            retention_days: Number of days of alert history to keep

        Returns:
            dict with counts of removed records:
            {
                "alert_history": int,
                "orphaned_workflows": int,
            }
        """
        workflow.logger.info(f"Starting alert maintenance (retention: {retention_days} days)")

        # Independent cleanups, run in parallel
        history_task = workflow.execute_activity(
            cleanup_alert_history,
            retention_days,
            start_to_close_timeout=timedelta(minutes=5),
            retry_policy=RetryPolicy(
                maximum_attempts=3,
                initial_interval=timedelta(seconds=2),
            ),
        )

        orphan_task = workflow.execute_activity(
            cleanup_orphaned_workflows,
            start_to_close_timeout=timedelta(minutes=5),
            retry_policy=RetryPolicy(
                maximum_attempts=3,
                initial_interval=timedelta(seconds=2),
            ),
        )

        result = {
            "alert_history": await history_task,
            "orphaned_workflows": await orphan_task,
        }

        workflow.logger.info(
            f"Alert maintenance complete: {result['alert_history']} history records, "
            f"{result['orphaned_workflows']} orphaned workflows"
        )
        return result
