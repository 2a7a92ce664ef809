"""Repository for Notification entity."""

from typing import cast
from uuid import UUID

from sqlalchemy import delete, func, update
from sqlalchemy.engine import CursorResult
from sqlmodel import col, select

from src.marketplace.models import Notification
from src.marketplace.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    model = Notification

    async def list_for_user(
        self,
        user_id: UUID,
        unread_only: bool = False,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[Notification], str | None, bool]:
        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.is_read == False)  # noqa: E712
        return await self.paginate(query, cursor, limit)

    async def count_unread(self, user_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.is_read == False,  # noqa: E712
            )
        )
        return int(result.scalar_one())

    async def mark_all_read(self, user_id: UUID) -> int:
        """Mark every unread notification of a user as read; returns the count."""
        result = await self.session.execute(
            update(Notification)
            .where(
                col(Notification.user_id) == user_id,
                col(Notification.is_read) == False,  # noqa: E712
            )
            .values(is_read=True)
        )
        return cast(CursorResult, result).rowcount

    async def delete_all(self, user_id: UUID) -> int:
        result = await self.session.execute(
            delete(Notification).where(col(Notification.user_id) == user_id)
        )
        return cast(CursorResult, result).rowcount
