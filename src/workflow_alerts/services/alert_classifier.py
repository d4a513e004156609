"""Due-date classification of workflow steps into alert tiers."""

import math
from dataclasses import dataclass
from datetime import datetime

from src.workflow_alerts.models import AlertTier, WorkflowStep

SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class AlertAssessment:
    """A step that needs an alert, with display-ready day counts (never negative)."""

    step: WorkflowStep
    tier: AlertTier
    days_until_due: int
    days_overdue: int


def classify(scheduled_end_date: datetime | None, alert_days: int, now: datetime) -> AlertTier | None:
    """Map a due date to an alert tier, or None when no alert is due yet.

    Day counts round up, so a step due in 30 hours is "due in 2 days" and a
    step 1 minute past due is "1 day overdue".
    """
    if scheduled_end_date is None:
        return None

    days_until_due, days_overdue = _day_counts(scheduled_end_date, now)
    if days_overdue > 0:
        return AlertTier.OVERDUE
    if days_until_due <= 1:
        return AlertTier.URGENT
    if days_until_due <= alert_days:
        return AlertTier.WARNING
    return None


def assess_step(step: WorkflowStep, now: datetime) -> AlertAssessment | None:
    """Classify a step; completed or undated steps never alert."""
    if step.is_completed or step.scheduled_end_date is None:
        return None

    tier = classify(step.scheduled_end_date, step.alert_days, now)
    if tier is None:
        return None

    days_until_due, days_overdue = _day_counts(step.scheduled_end_date, now)
    return AlertAssessment(
        step=step,
        tier=tier,
        days_until_due=max(0, days_until_due),
        days_overdue=max(0, days_overdue),
    )


def _day_counts(scheduled_end_date: datetime, now: datetime) -> tuple[int, int]:
    seconds = (scheduled_end_date - now).total_seconds()
    return math.ceil(seconds / SECONDS_PER_DAY), math.ceil(-seconds / SECONDS_PER_DAY)
