"""Workflow progression endpoints - step and sub-task completion."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from src.workflow_alerts.api.dependencies import WorkflowCompletionServiceDep
from src.workflow_alerts.schemas import (
    CompletionRequest,
    StepCompletionResponse,
    SubTaskCompletionResponse,
)

router = APIRouter(prefix="/workflows", tags=["workflows"])


@router.post(
    "/{workflow_id}/steps/{step_id}/complete",
    response_model=StepCompletionResponse,
    summary="Complete step",
    description=(
        "Mark a step (and its open sub-tasks) completed, update workflow progress "
        "and check alerts for the next step."
    ),
    responses={
        200: {"description": "Completion result"},
        404: {"description": "Workflow or step not found"},
    },
)
async def complete_step(
    workflow_id: UUID,
    step_id: str,
    data: CompletionRequest,
    service: WorkflowCompletionServiceDep,
) -> StepCompletionResponse:
    result = await service.complete_step(workflow_id, step_id, data.actor_id, data.notes)
    if result.not_found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)
    return StepCompletionResponse.model_validate(result)


@router.post(
    "/{workflow_id}/steps/{step_id}/subtasks/{sub_task_id}/complete",
    response_model=SubTaskCompletionResponse,
    summary="Complete sub-task",
    description="Mark a sub-task completed; the step completes once all its sub-tasks are done.",
    responses={
        200: {"description": "Completion result"},
        404: {"description": "Workflow, step or sub-task not found"},
    },
)
async def complete_subtask(
    workflow_id: UUID,
    step_id: str,
    sub_task_id: str,
    data: CompletionRequest,
    service: WorkflowCompletionServiceDep,
) -> SubTaskCompletionResponse:
    result = await service.complete_subtask(
        workflow_id, step_id, sub_task_id, data.actor_id, data.notes
    )
    if result.not_found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)
    return SubTaskCompletionResponse.model_validate(result)
