"""Step and sub-task completion with progress recalculation and cascade."""

import contextlib
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.workflow_alerts.core.alert_routing import AlertRoutingConfig, get_alert_routing
from src.workflow_alerts.core.exceptions import (
    NotFoundError,
    StepNotFoundError,
    SubTaskNotFoundError,
    WorkflowNotFoundError,
)
from src.workflow_alerts.core.logging import (
    bind_workflow_context,
    clear_workflow_context,
    get_logger,
)
from src.workflow_alerts.models import (
    ProjectWorkflow,
    User,
    WorkflowStatus,
    WorkflowStep,
    WorkflowSubTask,
)
from src.workflow_alerts.models.base import Clock, utc_now
from src.workflow_alerts.repositories import ProjectRepository, WorkflowRepository
from src.workflow_alerts.services.events import StepTransitioned, StepTransitionHandler
from src.workflow_alerts.services.notification_builder import build_completion_notification
from src.workflow_alerts.services.notification_service import NotificationService

logger = get_logger(__name__)


@dataclass
class StepCompletionResult:
    success: bool
    workflow: ProjectWorkflow | None = None
    step: WorkflowStep | None = None
    next_step: WorkflowStep | None = None
    error: str | None = None
    not_found: bool = False


@dataclass
class SubTaskCompletionResult:
    success: bool
    workflow: ProjectWorkflow | None = None
    sub_task: WorkflowSubTask | None = None
    step_completed: bool = False
    next_step: WorkflowStep | None = None
    error: str | None = None
    not_found: bool = False


class WorkflowCompletionService:
    """Applies completions to a workflow and moves it forward.

    The workflow row is locked for the duration of a completion so concurrent
    requests against the same workflow are applied one after the other. Side
    effects (completion notices, the next-step alert check) run after commit.
    Failures come back as results with success=False, never as exceptions.
    """

    def __init__(
        self,
        session: AsyncSession,
        workflow_repo: WorkflowRepository,
        project_repo: ProjectRepository,
        notification_service: NotificationService,
        on_step_transitioned: StepTransitionHandler | None = None,
        clock: Clock = utc_now,
        routing: AlertRoutingConfig | None = None,
    ):
        self.session = session
        self.workflow_repo = workflow_repo
        self.project_repo = project_repo
        self.notification_service = notification_service
        self.on_step_transitioned = on_step_transitioned
        self.clock = clock
        self.routing = routing or get_alert_routing()

    async def complete_step(
        self,
        workflow_id: UUID,
        step_id: str,
        actor_id: UUID,
        notes: str | None = None,
    ) -> StepCompletionResult:
        """Complete a step (and its open sub-tasks) on behalf of actor_id.

        Completing a step that is already complete changes nothing and sends
        no completion notice; the next-step alert check still runs.
        """
        bind_workflow_context(workflow_id)
        try:
            now = self.clock()
            try:
                workflow = await self._load(workflow_id)
                step = workflow.find_step(step_id)
                if step is None:
                    raise StepNotFoundError(step_id)

                newly_completed = not step.is_completed
                if newly_completed:
                    _mark_step_completed(step, actor_id, now, notes)
                _recalculate_progress(workflow, actor_id, now)
                await self.session.commit()

            except NotFoundError as e:
                await self._rollback()
                logger.warning("Step completion rejected", step_id=step_id, error=str(e))
                return StepCompletionResult(success=False, error=str(e), not_found=True)
            except Exception as e:
                await self._rollback()
                logger.error("Step completion failed", step_id=step_id, error=str(e))
                return StepCompletionResult(success=False, error=str(e))

            logger.info(
                "Step completed" if newly_completed else "Step already completed",
                step_id=step_id,
                actor_id=str(actor_id),
                overall_progress=workflow.overall_progress,
                status=workflow.status,
            )

            if newly_completed:
                await self._notify_completion(workflow, step, actor_id, now)
            next_step = await self._cascade(workflow, step)
            return StepCompletionResult(
                success=True, workflow=workflow, step=step, next_step=next_step
            )
        finally:
            clear_workflow_context()

    async def complete_subtask(
        self,
        workflow_id: UUID,
        step_id: str,
        sub_task_id: str,
        actor_id: UUID,
        notes: str | None = None,
    ) -> SubTaskCompletionResult:
        """Complete one sub-task; the step auto-completes once all its sub-tasks are done."""
        bind_workflow_context(workflow_id)
        try:
            now = self.clock()
            try:
                workflow = await self._load(workflow_id)
                step = workflow.find_step(step_id)
                if step is None:
                    raise StepNotFoundError(step_id)
                sub_task = step.find_sub_task(sub_task_id)
                if sub_task is None:
                    raise SubTaskNotFoundError(sub_task_id)

                if not sub_task.is_completed:
                    sub_task.is_completed = True
                    sub_task.completed_at = now
                    sub_task.completed_by_id = actor_id
                if notes is not None:
                    sub_task.notes = notes

                step_completed = False
                if not step.is_completed and all(st.is_completed for st in step.sub_tasks):
                    _mark_step_completed(step, actor_id, now)
                    _recalculate_progress(workflow, actor_id, now)
                    step_completed = True
                await self.session.commit()

            except NotFoundError as e:
                await self._rollback()
                logger.warning("Sub-task completion rejected", sub_task_id=sub_task_id, error=str(e))
                return SubTaskCompletionResult(success=False, error=str(e), not_found=True)
            except Exception as e:
                await self._rollback()
                logger.error("Sub-task completion failed", sub_task_id=sub_task_id, error=str(e))
                return SubTaskCompletionResult(success=False, error=str(e))

            logger.info(
                "Sub-task completed",
                step_id=step_id,
                sub_task_id=sub_task_id,
                actor_id=str(actor_id),
                step_completed=step_completed,
            )

            next_step = None
            if step_completed:
                await self._notify_completion(workflow, step, actor_id, now)
                next_step = await self._cascade(workflow, step)
            return SubTaskCompletionResult(
                success=True,
                workflow=workflow,
                sub_task=sub_task,
                step_completed=step_completed,
                next_step=next_step,
            )
        finally:
            clear_workflow_context()

    async def _load(self, workflow_id: UUID) -> ProjectWorkflow:
        workflow = await self.workflow_repo.get_with_steps(workflow_id, for_update=True)
        if workflow is None:
            raise WorkflowNotFoundError(workflow_id)
        return workflow

    async def _rollback(self) -> None:
        with contextlib.suppress(Exception):
            await self.session.rollback()

    async def _notify_completion(
        self, workflow: ProjectWorkflow, step: WorkflowStep, actor_id: UUID, completed_at: datetime
    ) -> int:
        """Tell the project manager and management team members, except the actor."""
        try:
            team = await self.project_repo.get_with_team(workflow.project_id)
        except Exception as e:
            logger.warning("Project lookup failed for completion notice", error=str(e))
            return 0
        if team is None:
            logger.warning("Project not found for completion notice", project_id=str(workflow.project_id))
            return 0

        candidates: list[User] = []
        if team.project_manager is not None:
            candidates.append(team.project_manager)
        roles = {role.value for role in self.routing.completion_roles}
        candidates.extend(member for member in team.team_members if member.role in roles)

        sent = 0
        seen = {actor_id}
        for recipient in candidates:
            if recipient.id in seen:
                continue
            seen.add(recipient.id)
            notification = build_completion_notification(
                workflow, step, team.project.project_name, recipient.id, actor_id, completed_at
            )
            if await self.notification_service.create(notification) is not None:
                sent += 1

        logger.info("Completion notices sent", step_id=step.step_id, sent=sent)
        return sent

    async def _cascade(self, workflow: ProjectWorkflow, step: WorkflowStep) -> WorkflowStep | None:
        """Hand the transition to the alert handler when an incomplete step follows."""
        next_step = workflow.next_incomplete_step()
        if next_step is None or self.on_step_transitioned is None:
            return next_step

        event = StepTransitioned(
            workflow_id=workflow.id,
            project_id=workflow.project_id,
            completed_step_id=step.step_id,
            next_step_id=next_step.step_id,
            completed_step_count=workflow.completed_step_count,
            total_step_count=len(workflow.steps),
        )
        logger.info("Triggering alerts for next step", next_step_id=next_step.step_id)
        try:
            await self.on_step_transitioned(event)
        except Exception as e:
            logger.error("Next-step alert check failed", next_step_id=next_step.step_id, error=str(e))
        return next_step


def _mark_step_completed(
    step: WorkflowStep, actor_id: UUID, now: datetime, notes: str | None = None
) -> None:
    step.is_completed = True
    step.completed_at = now
    step.completed_by_id = actor_id
    step.actual_end_date = now
    if notes is not None:
        step.completion_notes = notes
    for sub_task in step.sub_tasks:
        if not sub_task.is_completed:
            sub_task.is_completed = True
            sub_task.completed_at = now
            sub_task.completed_by_id = actor_id


def _recalculate_progress(workflow: ProjectWorkflow, actor_id: UUID, now: datetime) -> None:
    total = len(workflow.steps)
    completed = workflow.completed_step_count
    workflow.overall_progress = round(100 * completed / total) if total else 0
    workflow.current_step_index = completed
    workflow.last_modified_by_id = actor_id
    workflow.updated_at = now
    if total and completed >= total:
        workflow.status = WorkflowStatus.COMPLETED.value
        # Keep the original completion date when re-completing
        workflow.actual_completion_date = workflow.actual_completion_date or now
    else:
        workflow.status = WorkflowStatus.IN_PROGRESS.value
        workflow.actual_completion_date = None
