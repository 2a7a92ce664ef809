"""Project model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from src.marketplace.models.base import utc_now
from src.marketplace.models.enums import ProjectStatus, ProjectType


class Project(SQLModel, table=True):
    """Work posted by a client. `status` follows the project state machine."""

    __tablename__ = "projects"
    __table_args__ = (Index("ix_projects_status_created", "status", "created_at"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    client_id: UUID = Field(foreign_key="users.id", index=True)
    title: str = Field(max_length=200)
    description: str = Field(max_length=5000)
    project_type: str = Field(default=ProjectType.FIXED.value, max_length=20)
    budget_min: float | None = Field(default=None)
    budget_max: float | None = Field(default=None)
    status: str = Field(default=ProjectStatus.OPEN.value, max_length=20)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def status_enum(self) -> ProjectStatus:
        """Get status as ProjectStatus enum."""
        return ProjectStatus(self.status)
