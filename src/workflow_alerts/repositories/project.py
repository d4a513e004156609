"""Repository for Project entity."""

from dataclasses import dataclass, field
from uuid import UUID

from sqlmodel import select

from src.workflow_alerts.models import Project, ProjectTeamMember, User
from src.workflow_alerts.repositories.base import BaseRepository


@dataclass
class ProjectTeam:
    """A project together with the people attached to it."""

    project: Project
    project_manager: User | None = None
    team_members: list[User] = field(default_factory=list)


class ProjectRepository(BaseRepository[Project]):
    model = Project

    async def exists(self, project_id: UUID) -> bool:
        """Live existence check against the projects table."""
        result = await self.session.execute(select(Project.id).where(Project.id == project_id))
        return result.scalar_one_or_none() is not None

    async def get_with_team(self, project_id: UUID) -> ProjectTeam | None:
        """Load a project with its manager and team members."""
        project = await self.get_by_id(project_id)
        if project is None:
            return None

        manager = None
        if project.project_manager_id is not None:
            manager = await self.session.get(User, project.project_manager_id)

        result = await self.session.execute(
            select(User)
            .join(ProjectTeamMember, ProjectTeamMember.user_id == User.id)  # type: ignore[arg-type]
            .where(ProjectTeamMember.project_id == project_id)
        )
        return ProjectTeam(
            project=project,
            project_manager=manager,
            team_members=list(result.scalars().all()),
        )
