"""Model exports.

Import from here: `from src.workflow_alerts.models import ProjectWorkflow, User`
"""

# Enums
from src.workflow_alerts.models.enums import (
    AlertTier,
    NotificationPriority,
    NotificationType,
    ProjectPhase,
    ResponsibleRole,
    UserRole,
    WorkflowStatus,
)

# Tables
from src.workflow_alerts.models.notification import Notification
from src.workflow_alerts.models.project import Project, ProjectTeamMember
from src.workflow_alerts.models.user import User
from src.workflow_alerts.models.workflow import ProjectWorkflow, WorkflowStep, WorkflowSubTask

__all__ = [
    # Enums
    "AlertTier",
    "NotificationPriority",
    "NotificationType",
    "ProjectPhase",
    "ResponsibleRole",
    "UserRole",
    "WorkflowStatus",
    # Tables
    "Notification",
    "Project",
    "ProjectTeamMember",
    "ProjectWorkflow",
    "User",
    "WorkflowStep",
    "WorkflowSubTask",
]
