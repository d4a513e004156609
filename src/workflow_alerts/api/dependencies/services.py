"""Service factory dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.workflow_alerts.api.dependencies.db import DBSession
from src.workflow_alerts.api.dependencies.repositories import (
    ProjectRepo,
    UserRepo,
    WorkflowRepo,
)
from src.workflow_alerts.core.db import get_engine
from src.workflow_alerts.repositories import NotificationRepository
from src.workflow_alerts.services import (
    AlertHistory,
    NotificationService,
    RecipientResolver,
    WorkflowAlertService,
    WorkflowCompletionService,
    get_alert_history,
)


async def get_notification_service() -> AsyncGenerator[NotificationService]:
    """Get notification service with its own isolated session.

    Uses a dedicated session that commits independently from the workflow
    transaction, so a failed notification never rolls back a completion.
    """
    engine = get_engine()
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield NotificationService(NotificationRepository(session), session)


NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
AlertHistoryDep = Annotated[AlertHistory, Depends(get_alert_history)]


def get_workflow_alert_service(
    session: DBSession,
    workflow_repo: WorkflowRepo,
    project_repo: ProjectRepo,
    user_repo: UserRepo,
    alert_history: AlertHistoryDep,
    notification_service: NotificationServiceDep,
) -> WorkflowAlertService:
    return WorkflowAlertService(
        session,
        workflow_repo,
        project_repo,
        RecipientResolver(user_repo),
        alert_history,
        notification_service,
    )


WorkflowAlertServiceDep = Annotated[WorkflowAlertService, Depends(get_workflow_alert_service)]


def get_workflow_completion_service(
    session: DBSession,
    workflow_repo: WorkflowRepo,
    project_repo: ProjectRepo,
    notification_service: NotificationServiceDep,
    alert_service: WorkflowAlertServiceDep,
) -> WorkflowCompletionService:
    """Completion service whose step transitions cascade into an alert check."""
    return WorkflowCompletionService(
        session,
        workflow_repo,
        project_repo,
        notification_service,
        on_step_transitioned=alert_service.handle_step_transitioned,
    )


WorkflowCompletionServiceDep = Annotated[
    WorkflowCompletionService, Depends(get_workflow_completion_service)
]
