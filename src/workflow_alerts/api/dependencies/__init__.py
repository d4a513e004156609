"""FastAPI dependency injection definitions."""

# Database
from src.workflow_alerts.api.dependencies.db import DBSession, get_db_session

# Repositories
from src.workflow_alerts.api.dependencies.repositories import (
    ProjectRepo,
    UserRepo,
    WorkflowRepo,
    get_project_repository,
    get_user_repository,
    get_workflow_repository,
)

# Services
from src.workflow_alerts.api.dependencies.services import (
    AlertHistoryDep,
    NotificationServiceDep,
    WorkflowAlertServiceDep,
    WorkflowCompletionServiceDep,
    get_notification_service,
    get_workflow_alert_service,
    get_workflow_completion_service,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Repositories
    "ProjectRepo",
    "UserRepo",
    "WorkflowRepo",
    "get_project_repository",
    "get_user_repository",
    "get_workflow_repository",
    # Services
    "AlertHistoryDep",
    "NotificationServiceDep",
    "WorkflowAlertServiceDep",
    "WorkflowCompletionServiceDep",
    "get_notification_service",
    "get_workflow_alert_service",
    "get_workflow_completion_service",
]
