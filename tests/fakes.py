"""In-memory stand-ins for the stores the engine talks to."""

from collections.abc import Iterable
from datetime import datetime, timedelta
from unittest.mock import AsyncMock
from uuid import UUID

from src.workflow_alerts.models import (
    Notification,
    ProjectWorkflow,
    User,
    UserRole,
    WorkflowStatus,
)
from src.workflow_alerts.repositories import ProjectTeam


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeUserRepository:
    """User store over a list; set `failing` to make a lookup raise."""

    def __init__(self, users: Iterable[User] = ()):
        self.users = list(users)
        self.failing: set[str] = set()

    def _check(self, name: str) -> None:
        if name in self.failing:
            raise ConnectionError(f"{name} unavailable")

    async def get_by_id(self, id: UUID) -> User | None:
        self._check("get_by_id")
        return next((u for u in self.users if u.id == id), None)

    async def find_active_by_names(self, names: Iterable[tuple[str, str]]) -> list[User]:
        self._check("find_active_by_names")
        wanted = set(names)
        return [u for u in self.users if u.is_active and (u.first_name, u.last_name) in wanted]

    async def find_active_by_roles(self, roles: Iterable[UserRole | str]) -> list[User]:
        self._check("find_active_by_roles")
        values = {r.value if isinstance(r, UserRole) else r for r in roles}
        return [u for u in self.users if u.is_active and u.role in values]


class FakeProjectRepository:
    def __init__(self, teams: Iterable[ProjectTeam] = ()):
        self.teams = {team.project.id: team for team in teams}

    async def exists(self, project_id: UUID) -> bool:
        return project_id in self.teams

    async def get_with_team(self, project_id: UUID) -> ProjectTeam | None:
        return self.teams.get(project_id)


class FakeWorkflowRepository:
    def __init__(self, workflows: Iterable[ProjectWorkflow] = (), projects: FakeProjectRepository | None = None):
        self.workflows = {w.id: w for w in workflows}
        self.projects = projects
        self.locked: list[UUID] = []

    async def find_active_with_steps(self) -> list[ProjectWorkflow]:
        return [
            w
            for w in self.workflows.values()
            if w.status != WorkflowStatus.COMPLETED.value and w.steps
        ]

    async def get_with_steps(self, workflow_id: UUID, for_update: bool = False) -> ProjectWorkflow | None:
        if for_update:
            self.locked.append(workflow_id)
        return self.workflows.get(workflow_id)

    async def get_by_project_id(self, project_id: UUID) -> ProjectWorkflow | None:
        return next((w for w in self.workflows.values() if w.project_id == project_id), None)

    async def delete(self, workflow: ProjectWorkflow) -> None:
        self.workflows.pop(workflow.id, None)

    async def delete_orphaned(self) -> int:
        known = self.projects.teams if self.projects else {}
        orphans = [w for w in self.workflows.values() if w.project_id not in known]
        for workflow in orphans:
            del self.workflows[workflow.id]
        return len(orphans)


class FakeNotificationService:
    """Collects notifications; recipients in `failing_recipients` fail to store."""

    def __init__(self) -> None:
        self.created: list[Notification] = []
        self.failing_recipients: set[UUID] = set()

    async def create(self, notification: Notification) -> Notification | None:
        if notification.recipient_id in self.failing_recipients:
            return None
        self.created.append(notification)
        return notification

    def titles(self) -> list[str]:
        return [n.title for n in self.created]

    def recipients(self) -> list[UUID]:
        return [n.recipient_id for n in self.created]


def make_session() -> AsyncMock:
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session
