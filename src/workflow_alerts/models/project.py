"""Project models.

Projects are created and destroyed by the CRUD side of the application;
the engine only observes them.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.workflow_alerts.models.base import utc_now


class Project(SQLModel, table=True):
    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_name: str = Field(max_length=200, index=True)
    project_manager_id: UUID | None = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=utc_now)


class ProjectTeamMember(SQLModel, table=True):
    """Junction table for project team membership."""

    __tablename__ = "project_team_members"

    project_id: UUID = Field(foreign_key="projects.id", primary_key=True, ondelete="CASCADE")
    user_id: UUID = Field(foreign_key="users.id", primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)
