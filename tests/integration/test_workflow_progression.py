"""End-to-end completion and alert cascade against PostgreSQL."""

from collections.abc import Callable
from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.workflow_alerts.models import UserRole
from src.workflow_alerts.repositories import (
    NotificationRepository,
    ProjectRepository,
    UserRepository,
    WorkflowRepository,
)
from src.workflow_alerts.services import (
    AlertHistory,
    InMemoryAlertHistoryBackend,
    NotificationService,
    RecipientResolver,
    WorkflowAlertService,
    WorkflowCompletionService,
)
from tests.factories import (
    ProjectFactory,
    ProjectWorkflowFactory,
    UserFactory,
    WorkflowStepFactory,
)

pytestmark = pytest.mark.integration


async def test_completion_persists_progress_and_alerts_next_step(
    session_factory: Callable[[], AsyncSession], clock, routing
):
    office_user = UserFactory.named("Office", "User", UserRole.ADMIN)
    pm = UserFactory.named("Paula", "Manager", UserRole.PROJECT_MANAGER)
    worker = UserFactory.named("Walt", "Worker", UserRole.WORKER)
    team = ProjectFactory.build_team(manager=pm)
    workflow = ProjectWorkflowFactory.build_with_steps(
        team.project.id,
        [
            WorkflowStepFactory.build_step("A", "Site Inspection"),
            WorkflowStepFactory.build_step("B", "Write Estimate", due=clock() + timedelta(days=1)),
            WorkflowStepFactory.build_step("C", "Insurance Process"),
        ],
    )
    async with session_factory() as setup:
        setup.add_all([office_user, pm, worker, team.project, workflow])
        await setup.commit()

    async with session_factory() as session, session_factory() as notification_session:
        notifications = NotificationService(
            NotificationRepository(notification_session), notification_session
        )
        alerts = WorkflowAlertService(
            session,
            WorkflowRepository(session),
            ProjectRepository(session),
            RecipientResolver(UserRepository(session), routing),
            AlertHistory(InMemoryAlertHistoryBackend(), clock=clock),
            notifications,
            clock=clock,
            routing=routing,
        )
        completion = WorkflowCompletionService(
            session,
            WorkflowRepository(session),
            ProjectRepository(session),
            notifications,
            on_step_transitioned=alerts.handle_step_transitioned,
            clock=clock,
            routing=routing,
        )

        result = await completion.complete_step(workflow.id, "A", worker.id)

    assert result.success
    assert result.next_step.step_id == "B"

    async with session_factory() as check:
        stored = await WorkflowRepository(check).get_with_steps(workflow.id)
        assert stored.overall_progress == 33
        assert stored.current_step_index == 1
        assert stored.find_step("A").completed_by_id == worker.id

        office_inbox = await NotificationRepository(check).list_for_recipient(office_user.id)
        pm_inbox = await NotificationRepository(check).list_for_recipient(pm.id)

    assert [n.action_data["stepId"] for n in office_inbox] == ["B"]
    assert {n.title for n in pm_inbox} == {
        "Workflow Alert: Write Estimate",
        "Step Completed: Site Inspection",
    }
