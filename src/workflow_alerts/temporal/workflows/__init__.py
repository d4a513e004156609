"""Temporal Workflows - Re-exports for worker registration."""

from src.workflow_alerts.temporal.workflows.alert_maintenance import AlertMaintenanceWorkflow
from src.workflow_alerts.temporal.workflows.alert_sweep import WorkflowAlertSweepWorkflow

__all__ = [
    "AlertMaintenanceWorkflow",
    "WorkflowAlertSweepWorkflow",
]
