"""Repository for Notification entity."""

from uuid import UUID

from sqlmodel import select

from src.workflow_alerts.models import Notification
from src.workflow_alerts.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    model = Notification

    async def list_for_recipient(self, recipient_id: UUID, limit: int = 50) -> list[Notification]:
        """Most recent notifications for a user, newest first."""
        result = await self.session.execute(
            select(Notification)
            .where(Notification.recipient_id == recipient_id)
            .order_by(Notification.created_at.desc())  # type: ignore[attr-defined]
            .limit(limit)
        )
        return list(result.scalars().all())
