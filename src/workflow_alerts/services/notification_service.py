"""Notification sink - persists notifications for the delivery/UI side."""

import contextlib

from sqlalchemy.ext.asyncio import AsyncSession

from src.workflow_alerts.core.logging import get_logger
from src.workflow_alerts.models import Notification
from src.workflow_alerts.repositories import NotificationRepository

logger = get_logger(__name__)


class NotificationService:
    """Service for recording notifications.

    Fire-and-forget design: a failed notification must not block the scan or
    the completion that produced it. Use a session of its own so a rollback
    here leaves the caller's transaction untouched.
    """

    def __init__(self, notification_repo: NotificationRepository, session: AsyncSession):
        self.notification_repo = notification_repo
        self.session = session

    async def create(self, notification: Notification) -> Notification | None:
        """Persist one notification.

        Returns:
            The stored notification, or None if it could not be written
        """
        try:
            self.notification_repo.add(notification)
            await self.session.commit()

            logger.debug(
                "Notification created",
                recipient_id=str(notification.recipient_id),
                title=notification.title,
                priority=notification.priority,
            )
            return notification

        except Exception as e:
            logger.warning(
                "Failed to create notification",
                recipient_id=str(notification.recipient_id),
                title=notification.title,
                error=str(e),
            )
            with contextlib.suppress(Exception):
                await self.session.rollback()
            return None
