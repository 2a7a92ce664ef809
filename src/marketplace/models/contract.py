"""Contract model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.marketplace.models.base import utc_now
from src.marketplace.models.enums import ContractStatus


class Contract(SQLModel, table=True):
    """Agreement between a project's client and a partner."""

    __tablename__ = "contracts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    partner_id: UUID = Field(foreign_key="partner_profiles.id", index=True)
    proposal_id: UUID | None = Field(default=None, foreign_key="proposals.id")
    agreed_rate: float
    terms: str | None = Field(default=None, max_length=10000)
    status: str = Field(default=ContractStatus.ACTIVE.value, max_length=20)
    start_date: datetime = Field(default_factory=utc_now)
    end_date: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def status_enum(self) -> ContractStatus:
        """Get status as ContractStatus enum."""
        return ContractStatus(self.status)
