"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.workflow_alerts.api.dependencies.db import DBSession
from src.workflow_alerts.repositories import (
    ProjectRepository,
    UserRepository,
    WorkflowRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_project_repository(session: DBSession) -> ProjectRepository:
    return ProjectRepository(session)


def get_workflow_repository(session: DBSession) -> WorkflowRepository:
    return WorkflowRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
WorkflowRepo = Annotated[WorkflowRepository, Depends(get_workflow_repository)]
