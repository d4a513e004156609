"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, WorkflowStepFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.project import ProjectFactory, ProjectTeamMemberFactory
from tests.factories.user import UserFactory
from tests.factories.workflow import (
    ProjectWorkflowFactory,
    WorkflowStepFactory,
    WorkflowSubTaskFactory,
)

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # User
    "UserFactory",
    # Project
    "ProjectFactory",
    "ProjectTeamMemberFactory",
    # Workflow
    "ProjectWorkflowFactory",
    "WorkflowStepFactory",
    "WorkflowSubTaskFactory",
]
