"""Repository for ProjectWorkflow aggregates (workflow + steps + sub-tasks)."""

from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.orm import selectinload
from sqlmodel import select

from src.workflow_alerts.models import (
    Project,
    ProjectWorkflow,
    WorkflowStatus,
    WorkflowStep,
)
from src.workflow_alerts.repositories.base import BaseRepository


class WorkflowRepository(BaseRepository[ProjectWorkflow]):
    model = ProjectWorkflow

    def _with_steps(self):  # type: ignore[no-untyped-def]
        return select(ProjectWorkflow).options(
            selectinload(ProjectWorkflow.steps).selectinload(WorkflowStep.sub_tasks)  # type: ignore[arg-type]
        )

    async def find_active_with_steps(self) -> list[ProjectWorkflow]:
        """Workflows still in progress that have at least one step defined."""
        result = await self.session.execute(
            self._with_steps()
            .where(ProjectWorkflow.status != WorkflowStatus.COMPLETED.value)
            .where(ProjectWorkflow.steps.any())  # type: ignore[attr-defined]
            .order_by(ProjectWorkflow.created_at)  # type: ignore[arg-type]
        )
        return list(result.scalars().unique().all())

    async def get_with_steps(
        self, workflow_id: UUID, for_update: bool = False
    ) -> ProjectWorkflow | None:
        """Get a workflow with steps and sub-tasks loaded.

        Args:
            workflow_id: Workflow primary key
            for_update: If True, locks the workflow row so concurrent completions
                       of the same workflow are serialized
        """
        query = self._with_steps().where(ProjectWorkflow.id == workflow_id)
        if for_update:
            query = query.with_for_update(of=ProjectWorkflow)  # type: ignore[arg-type]
        # populate_existing refreshes a row already in the identity map after the lock
        query = query.execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalars().unique().one_or_none()

    async def get_by_project_id(self, project_id: UUID) -> ProjectWorkflow | None:
        result = await self.session.execute(
            self._with_steps().where(ProjectWorkflow.project_id == project_id)
        )
        return result.scalars().unique().one_or_none()

    async def delete(self, workflow: ProjectWorkflow) -> None:
        """Delete a workflow; steps and sub-tasks cascade."""
        await self.session.delete(workflow)

    async def delete_orphaned(self) -> int:
        """Delete every workflow whose project no longer exists.

        Idempotent: a second run finds nothing to delete.

        Returns:
            Number of workflows deleted
        """
        stmt = delete(ProjectWorkflow).where(
            ProjectWorkflow.project_id.not_in(select(Project.id))  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]
