"""Notification model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from src.marketplace.models.base import utc_now


class Notification(SQLModel, table=True):
    """In-app notification, written after the triggering transaction commits."""

    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_user_created", "user_id", "created_at"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id")
    type: str = Field(max_length=50)  # NotificationType value
    title: str = Field(max_length=200)
    message: str = Field(max_length=1000)
    link: str | None = Field(default=None, max_length=500)
    is_read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
