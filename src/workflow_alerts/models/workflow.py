"""Project workflow models - ordered steps with sub-tasks."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from src.workflow_alerts.models.base import utc_now
from src.workflow_alerts.models.enums import WorkflowStatus


class ProjectWorkflow(SQLModel, table=True):
    """Workflow tracking a project's ordered sequence of steps.

    project_id deliberately has no foreign key: projects are deleted outside
    the engine, and a workflow left behind is detected and removed by the
    orphan sweep.
    """

    __tablename__ = "project_workflows"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(index=True, unique=True)
    status: str = Field(default=WorkflowStatus.IN_PROGRESS.value, max_length=20, index=True)
    overall_progress: int = Field(default=0)
    current_step_index: int = Field(default=0)
    actual_completion_date: datetime | None = Field(default=None)
    last_modified_by_id: UUID | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    steps: list["WorkflowStep"] = Relationship(
        back_populates="workflow",
        sa_relationship_kwargs={
            "order_by": "WorkflowStep.position",
            "lazy": "selectin",
            "cascade": "all, delete-orphan",
        },
    )

    @property
    def completed_step_count(self) -> int:
        return sum(1 for step in self.steps if step.is_completed)

    def find_step(self, step_id: str) -> "WorkflowStep | None":
        """Find a step by its stable step_id (not the database id)."""
        return next((step for step in self.steps if step.step_id == step_id), None)

    def next_incomplete_step(self) -> "WorkflowStep | None":
        """First step in sequence that is not yet completed."""
        return next((step for step in self.steps if not step.is_completed), None)


class WorkflowStep(SQLModel, table=True):
    __tablename__ = "workflow_steps"
    __table_args__ = (UniqueConstraint("workflow_id", "step_id", name="uq_workflow_steps_step_id"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    workflow_id: UUID | None = Field(
        default=None, foreign_key="project_workflows.id", index=True, ondelete="CASCADE"
    )
    position: int = Field(default=0)
    step_id: str = Field(max_length=100)
    step_name: str = Field(max_length=200)
    phase: str = Field(max_length=50)
    scheduled_end_date: datetime | None = Field(default=None)
    alert_days: int = Field(default=1)
    default_responsible: str | None = Field(default=None, max_length=50)
    assigned_to_id: UUID | None = Field(default=None, foreign_key="users.id")
    is_completed: bool = Field(default=False)
    completed_at: datetime | None = Field(default=None)
    completed_by_id: UUID | None = Field(default=None)
    completion_notes: str | None = Field(default=None, max_length=2000)
    actual_end_date: datetime | None = Field(default=None)

    workflow: ProjectWorkflow | None = Relationship(back_populates="steps")
    sub_tasks: list["WorkflowSubTask"] = Relationship(
        back_populates="step",
        sa_relationship_kwargs={
            "order_by": "WorkflowSubTask.position",
            "lazy": "selectin",
            "cascade": "all, delete-orphan",
        },
    )

    def find_sub_task(self, sub_task_id: str) -> "WorkflowSubTask | None":
        return next((st for st in self.sub_tasks if st.sub_task_id == sub_task_id), None)

    @property
    def completed_sub_task_count(self) -> int:
        return sum(1 for st in self.sub_tasks if st.is_completed)


class WorkflowSubTask(SQLModel, table=True):
    __tablename__ = "workflow_subtasks"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    step_id: UUID | None = Field(
        default=None, foreign_key="workflow_steps.id", index=True, ondelete="CASCADE"
    )
    position: int = Field(default=0)
    sub_task_id: str = Field(max_length=100)
    sub_task_name: str = Field(default="", max_length=200)
    is_completed: bool = Field(default=False)
    completed_at: datetime | None = Field(default=None)
    completed_by_id: UUID | None = Field(default=None)
    notes: str | None = Field(default=None, max_length=2000)

    step: WorkflowStep | None = Relationship(back_populates="sub_tasks")
