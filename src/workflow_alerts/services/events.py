"""Events raised by workflow progression."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class StepTransitioned:
    """A step completed and the workflow moved on to its next step.

    Consumed by exactly one handler that re-checks alerts for this workflow
    only. Handlers never complete steps, so the cascade stops after one hop.
    """

    workflow_id: UUID
    project_id: UUID
    completed_step_id: str
    next_step_id: str | None
    completed_step_count: int
    total_step_count: int


StepTransitionHandler = Callable[[StepTransitioned], Awaitable[object]]
