"""Workflow schemas for API request/response."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class CompletionRequest(BaseModel):
    """Schema for completing a step or sub-task."""

    actor_id: UUID = Field(description="User completing the step or sub-task")
    notes: str | None = Field(default=None, max_length=2000)

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                return None
        return v


class SubTaskRead(BaseModel):
    sub_task_id: str
    sub_task_name: str
    is_completed: bool
    completed_at: datetime | None
    completed_by_id: UUID | None
    notes: str | None

    model_config = {"from_attributes": True}


class StepRead(BaseModel):
    step_id: str
    step_name: str
    phase: str
    scheduled_end_date: datetime | None
    alert_days: int
    default_responsible: str | None
    assigned_to_id: UUID | None
    is_completed: bool
    completed_at: datetime | None
    completed_by_id: UUID | None
    sub_tasks: list[SubTaskRead] = []

    model_config = {"from_attributes": True}


class WorkflowRead(BaseModel):
    """Schema for reading a workflow with its steps."""

    id: UUID
    project_id: UUID
    status: str
    overall_progress: int
    current_step_index: int
    actual_completion_date: datetime | None
    steps: list[StepRead] = []

    model_config = {"from_attributes": True}


class StepCompletionResponse(BaseModel):
    success: bool
    workflow: WorkflowRead | None = None
    next_step: StepRead | None = None
    error: str | None = None

    model_config = {"from_attributes": True}


class SubTaskCompletionResponse(BaseModel):
    success: bool
    sub_task: SubTaskRead | None = None
    step_completed: bool = False
    next_step: StepRead | None = None
    error: str | None = None

    model_config = {"from_attributes": True}
