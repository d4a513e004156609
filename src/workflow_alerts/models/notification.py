"""Notification model - written by the engine, read by the delivery/UI side."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Column, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.workflow_alerts.models.base import utc_now
from src.workflow_alerts.models.enums import NotificationPriority, NotificationType


class Notification(SQLModel, table=True):
    """In-app notification. Created once, never mutated by the engine."""

    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_recipient_created", "recipient_id", "created_at"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    recipient_id: UUID = Field(foreign_key="users.id")
    title: str = Field(max_length=255)
    message: str = Field(max_length=2000)
    type: str = Field(default=NotificationType.WORKFLOW_ALERT.value, max_length=50)
    priority: str = Field(default=NotificationPriority.MEDIUM.value, max_length=20)
    action_url: str | None = Field(default=None, max_length=500)

    # Machine-readable payload; key names are consumed by the UI as-is
    action_data: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSONB, nullable=True),
    )

    project_id: UUID | None = Field(default=None, index=True)
    is_read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
