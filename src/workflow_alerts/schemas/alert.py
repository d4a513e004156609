"""Alert schemas for API responses."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel


class ScanSummaryRead(BaseModel):
    """Counters from an alert sweep."""

    workflows_checked: int
    alerts_generated: int
    workflows_skipped: int
    orphans_removed: int
    workflows_failed: int

    model_config = {"from_attributes": True}


class NotificationRead(BaseModel):
    id: UUID
    recipient_id: UUID
    title: str
    message: str
    type: str
    priority: str
    action_url: str | None
    action_data: dict[str, Any] | None
    created_at: datetime

    model_config = {"from_attributes": True}


class AlertCheckResponse(BaseModel):
    """Notifications created by a single-project or single-workflow check."""

    alerts_generated: int
    notifications: list[NotificationRead]


class HistoryCleanupResponse(BaseModel):
    removed: int
