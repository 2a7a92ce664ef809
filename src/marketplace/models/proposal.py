"""Proposal model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index, text
from sqlmodel import Field, SQLModel

from src.marketplace.models.base import utc_now
from src.marketplace.models.enums import ProposalStatus

_ACTIVE_PROPOSAL = text("status <> 'withdrawn'")


class Proposal(SQLModel, table=True):
    """A partner's bid on a project.

    At most one non-withdrawn proposal may exist per (project, partner);
    the partial unique index backs up the service-level check.
    """

    __tablename__ = "proposals"
    __table_args__ = (
        Index(
            "uq_proposals_project_partner_active",
            "project_id",
            "partner_id",
            unique=True,
            postgresql_where=_ACTIVE_PROPOSAL,
            sqlite_where=_ACTIVE_PROPOSAL,
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    partner_id: UUID = Field(foreign_key="partner_profiles.id", index=True)
    cover_letter: str = Field(max_length=5000)
    proposed_rate: float
    estimated_duration_weeks: int | None = Field(default=None)
    status: str = Field(default=ProposalStatus.PENDING.value, max_length=20)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def status_enum(self) -> ProposalStatus:
        """Get status as ProposalStatus enum."""
        return ProposalStatus(self.status)
