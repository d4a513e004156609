"""Repository tests against PostgreSQL."""

from datetime import timedelta
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.workflow_alerts.models import UserRole
from src.workflow_alerts.repositories import (
    ProjectRepository,
    UserRepository,
    WorkflowRepository,
)
from tests.factories import (
    ProjectFactory,
    ProjectTeamMemberFactory,
    ProjectWorkflowFactory,
    UserFactory,
    WorkflowStepFactory,
)

pytestmark = pytest.mark.integration


async def test_find_active_by_names_skips_inactive(db_session: AsyncSession):
    active = UserFactory.named("Office", "User", UserRole.ADMIN)
    inactive = UserFactory.named("Field", "Director", UserRole.FIELD_DIRECTOR, is_active=False)
    other = UserFactory.named("Office", "Temp", UserRole.ADMIN)
    db_session.add_all([active, inactive, other])
    await db_session.commit()

    found = await UserRepository(db_session).find_active_by_names(
        [("Office", "User"), ("Field", "Director")]
    )

    assert [u.id for u in found] == [active.id]


async def test_find_active_by_roles(db_session: AsyncSession):
    admin = UserFactory.named("Ada", "Admin", UserRole.ADMIN)
    manager = UserFactory.named("Max", "Manager", UserRole.MANAGER, is_active=False)
    worker = UserFactory.named("Walt", "Worker", UserRole.WORKER)
    db_session.add_all([admin, manager, worker])
    await db_session.commit()

    found = await UserRepository(db_session).find_active_by_roles(
        [UserRole.ADMIN, UserRole.MANAGER]
    )

    assert [u.id for u in found] == [admin.id]


async def test_get_with_team(db_session: AsyncSession):
    pm = UserFactory.named("Paula", "Manager", UserRole.PROJECT_MANAGER)
    member = UserFactory.named("Ada", "Admin", UserRole.ADMIN)
    team = ProjectFactory.build_team(manager=pm, members=[member])
    db_session.add_all([pm, member, team.project])
    await db_session.flush()
    db_session.add_all(ProjectTeamMemberFactory.for_team(team))
    await db_session.commit()

    repo = ProjectRepository(db_session)
    loaded = await repo.get_with_team(team.project.id)

    assert loaded is not None
    assert loaded.project_manager.id == pm.id
    assert [u.id for u in loaded.team_members] == [member.id]
    assert await repo.exists(team.project.id)
    assert not await repo.exists(uuid4())
    assert await repo.get_with_team(uuid4()) is None


async def test_find_active_with_steps(db_session: AsyncSession):
    team = ProjectFactory.build_team()
    active = ProjectWorkflowFactory.build_with_steps(
        team.project.id,
        [
            WorkflowStepFactory.build_step("A", sub_tasks=["a1", "a2"]),
            WorkflowStepFactory.build_step("B"),
        ],
    )
    done = ProjectWorkflowFactory.completed(
        uuid4(), [WorkflowStepFactory.build_step("A", completed=True)]
    )
    empty = ProjectWorkflowFactory.build_with_steps(uuid4(), [])
    db_session.add_all([team.project, active, done, empty])
    await db_session.commit()
    db_session.expunge_all()

    found = await WorkflowRepository(db_session).find_active_with_steps()

    assert [w.id for w in found] == [active.id]
    assert [s.step_id for s in found[0].steps] == ["A", "B"]
    assert [st.sub_task_id for st in found[0].steps[0].sub_tasks] == ["a1", "a2"]


async def test_get_with_steps_for_update(db_session: AsyncSession):
    workflow = ProjectWorkflowFactory.build_with_steps(
        uuid4(),
        [WorkflowStepFactory.build_step("A"), WorkflowStepFactory.build_step("B")],
    )
    db_session.add(workflow)
    await db_session.commit()

    repo = WorkflowRepository(db_session)
    locked = await repo.get_with_steps(workflow.id, for_update=True)

    assert locked is not None
    assert locked.find_step("B") is not None
    await db_session.rollback()
    assert await repo.get_with_steps(uuid4()) is None


async def test_delete_orphaned_is_idempotent(db_session: AsyncSession):
    team = ProjectFactory.build_team()
    live = ProjectWorkflowFactory.build_with_steps(
        team.project.id,
        [WorkflowStepFactory.build_step("A", sub_tasks=["a1"])],
    )
    orphans = [
        ProjectWorkflowFactory.build_with_steps(
            uuid4(), [WorkflowStepFactory.build_step("A", sub_tasks=["a1"])]
        )
        for _ in range(2)
    ]
    db_session.add_all([team.project, live, *orphans])
    await db_session.commit()

    repo = WorkflowRepository(db_session)
    first = await repo.delete_orphaned()
    await db_session.commit()
    second = await repo.delete_orphaned()
    await db_session.commit()
    db_session.expunge_all()

    assert (first, second) == (2, 0)
    assert await repo.get_with_steps(live.id) is not None
    assert await repo.get_with_steps(orphans[0].id) is None


async def test_get_by_project_id(db_session: AsyncSession, clock):
    team = ProjectFactory.build_team()
    workflow = ProjectWorkflowFactory.build_with_steps(
        team.project.id,
        [WorkflowStepFactory.build_step("A", due=clock() + timedelta(days=1))],
    )
    db_session.add_all([team.project, workflow])
    await db_session.commit()

    found = await WorkflowRepository(db_session).get_by_project_id(team.project.id)

    assert found.id == workflow.id
    assert found.steps[0].scheduled_end_date == clock() + timedelta(days=1)
