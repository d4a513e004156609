"""Notification payloads for due-date alerts and step completions.

Pure construction: nothing here touches the database. The actionData key
names are read by the notification UI and must not change.
"""

from datetime import datetime
from uuid import UUID

from src.workflow_alerts.core.alert_routing import AlertRoutingConfig, get_alert_routing
from src.workflow_alerts.core.config import get_settings
from src.workflow_alerts.models import (
    AlertTier,
    Notification,
    NotificationPriority,
    NotificationType,
    ProjectWorkflow,
    WorkflowStep,
)
from src.workflow_alerts.services.alert_classifier import AlertAssessment

TIER_PRIORITY = {
    AlertTier.WARNING: NotificationPriority.MEDIUM,
    AlertTier.URGENT: NotificationPriority.HIGH,
    AlertTier.OVERDUE: NotificationPriority.HIGH,
}

UNKNOWN_RESPONSIBLE = "Unknown"


def workflow_action_url(project_id: UUID) -> str:
    """Link to the project's workflow page; absolute when APP_URL is set."""
    path = f"/projects/{project_id}/workflow"
    app_url = get_settings().app_url
    if app_url:
        return app_url.rstrip("/") + path
    return path


def _days(n: int) -> str:
    return f"{n} day" if n == 1 else f"{n} days"


def _sub_task_progress(step: WorkflowStep) -> str:
    if not step.sub_tasks:
        return ""
    return f" ({step.completed_sub_task_count}/{len(step.sub_tasks)} sub-tasks complete)"


def alert_message(
    assessment: AlertAssessment, project_name: str, routing: AlertRoutingConfig | None = None
) -> str:
    routing = routing or get_alert_routing()
    step = assessment.step
    progress = _sub_task_progress(step)
    guidance = routing.guidance_for(step.step_name)

    if assessment.tier == AlertTier.OVERDUE:
        return (
            f"{step.step_name} for {project_name} is "
            f"{_days(assessment.days_overdue)} overdue!{progress}. {guidance}"
        )
    if assessment.tier == AlertTier.URGENT:
        if assessment.days_until_due == 0:
            return f"{step.step_name} for {project_name} is due TODAY{progress}! {guidance}"
        return (
            f"{step.step_name} for {project_name} is due in "
            f"{_days(assessment.days_until_due)}{progress}! {guidance}"
        )
    return (
        f"{step.step_name} for {project_name} is due in "
        f"{_days(assessment.days_until_due)}{progress}. {guidance}"
    )


def build_alert_notification(
    workflow: ProjectWorkflow,
    assessment: AlertAssessment,
    project_name: str,
    recipient_id: UUID,
    routing: AlertRoutingConfig | None = None,
) -> Notification:
    """Build the due-date alert for one recipient."""
    routing = routing or get_alert_routing()
    step = assessment.step
    return Notification(
        recipient_id=recipient_id,
        title=f"Workflow Alert: {step.step_name}",
        message=alert_message(assessment, project_name, routing),
        type=NotificationType.WORKFLOW_ALERT.value,
        priority=TIER_PRIORITY[assessment.tier].value,
        action_url=workflow_action_url(workflow.project_id),
        action_data={
            "workflowId": str(workflow.id),
            "stepId": step.step_id,
            "stepName": step.step_name,
            "cleanTaskName": routing.clean_task_name(step.step_name),
            "phase": step.phase,
            "daysUntilDue": assessment.days_until_due,
            "daysOverdue": assessment.days_overdue,
            "projectName": project_name,
            "user": step.default_responsible or UNKNOWN_RESPONSIBLE,
        },
        project_id=workflow.project_id,
    )


def build_completion_notification(
    workflow: ProjectWorkflow,
    step: WorkflowStep,
    project_name: str,
    recipient_id: UUID,
    completed_by_id: UUID,
    completed_at: datetime,
) -> Notification:
    """Build the "step completed" notice for one recipient."""
    return Notification(
        recipient_id=recipient_id,
        title=f"Step Completed: {step.step_name}",
        message=f'{step.phase} step "{step.step_name}" completed for {project_name}',
        type=NotificationType.WORKFLOW_ALERT.value,
        priority=NotificationPriority.MEDIUM.value,
        action_url=workflow_action_url(workflow.project_id),
        action_data={
            "workflowId": str(workflow.id),
            "stepId": step.step_id,
            "stepName": step.step_name,
            "phase": step.phase,
            "completedBy": str(completed_by_id),
            "completedAt": completed_at.isoformat(),
            "overallProgress": workflow.overall_progress,
        },
        project_id=workflow.project_id,
    )
