"""Repository layer - data access abstraction."""

from src.workflow_alerts.repositories.base import BaseRepository
from src.workflow_alerts.repositories.notification import NotificationRepository
from src.workflow_alerts.repositories.project import ProjectRepository, ProjectTeam
from src.workflow_alerts.repositories.user import UserRepository
from src.workflow_alerts.repositories.workflow import WorkflowRepository

__all__ = [
    # Base
    "BaseRepository",
    # Stores
    "NotificationRepository",
    "ProjectRepository",
    "ProjectTeam",
    "UserRepository",
    "WorkflowRepository",
]
