"""In-app notifications - recorded after the triggering transaction commits."""

import contextlib
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace.core.db import transaction
from src.marketplace.core.exceptions import NotFoundError
from src.marketplace.core.logging import get_logger
from src.marketplace.models import Notification, NotificationType
from src.marketplace.repositories import NotificationRepository

logger = get_logger(__name__)


class NotificationService:
    """Service for recording and reading notifications.

    Fire-and-forget design: delivery failures never fail the workflow
    operation that triggered them. Give it its own session so a failed
    write cannot touch the business transaction.
    """

    def __init__(self, notification_repo: NotificationRepository, session: AsyncSession):
        self.notification_repo = notification_repo
        self.session = session

    async def notify(
        self,
        user_id: UUID,
        type: NotificationType,
        title: str,
        message: str,
        link: str | None = None,
    ) -> Notification | None:
        """Record a notification.

        Returns:
            The created Notification, or None if recording failed
        """
        try:
            notification = Notification(
                user_id=user_id,
                type=type.value,
                title=title,
                message=message[:1000],
                link=link,
            )
            self.notification_repo.add(notification)
            await self.session.commit()

            logger.debug("Notification recorded", user_id=str(user_id), type=type.value)
            return notification

        except Exception as e:
            logger.warning(
                "Failed to record notification",
                user_id=str(user_id),
                type=type.value,
                error=str(e),
            )
            with contextlib.suppress(Exception):
                await self.session.rollback()
            return None

    async def list_for_user(
        self,
        user_id: UUID,
        unread_only: bool = False,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[Notification], str | None, bool]:
        return await self.notification_repo.list_for_user(
            user_id, unread_only=unread_only, cursor=cursor, limit=limit
        )

    async def mark_read(self, user_id: UUID, notification_id: UUID) -> Notification:
        """Mark one of the user's notifications as read.

        Raises:
            NotFoundError: If the notification does not exist or belongs to another user.
        """
        async with transaction(self.session):
            notification = await self.notification_repo.get_by_id(notification_id)
            if notification is None or notification.user_id != user_id:
                raise NotFoundError("Notification", "Notification not found")
            if not notification.is_read:
                await self.notification_repo.update(notification, {"is_read": True})
        return notification

    async def unread_count(self, user_id: UUID) -> int:
        return await self.notification_repo.count_unread(user_id)

    async def mark_all_read(self, user_id: UUID) -> int:
        """Mark all of the user's notifications as read; returns how many changed."""
        async with transaction(self.session):
            updated = await self.notification_repo.mark_all_read(user_id)
        logger.info("Notifications marked read", user_id=str(user_id), count=updated)
        return updated

    async def delete(self, user_id: UUID, notification_id: UUID) -> None:
        """Delete one of the user's notifications.

        Raises:
            NotFoundError: If the notification does not exist or belongs to another user.
        """
        async with transaction(self.session):
            notification = await self.notification_repo.get_by_id(notification_id)
            if notification is None or notification.user_id != user_id:
                raise NotFoundError("Notification", "Notification not found")
            await self.notification_repo.delete(notification)

    async def delete_all(self, user_id: UUID) -> int:
        async with transaction(self.session):
            deleted = await self.notification_repo.delete_all(user_id)
        logger.info("Notifications deleted", user_id=str(user_id), count=deleted)
        return deleted
