"""Contract input schemas."""

from datetime import UTC, datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, Field, field_validator, model_validator

from src.marketplace.models.enums import ContractStatus


def _as_naive_utc(v: datetime) -> datetime:
    if v.tzinfo is not None:
        return v.astimezone(UTC).replace(tzinfo=None)
    return v


# Timestamp columns hold naive UTC
NaiveUtcDatetime = Annotated[datetime, AfterValidator(_as_naive_utc)]


class ContractCreate(BaseModel):
    """Terms for a new contract. `proposal_id` is optional (direct hire)."""

    project_id: UUID
    partner_id: UUID
    proposal_id: UUID | None = None
    agreed_rate: float = Field(gt=0)
    terms: str | None = Field(default=None, max_length=10000)
    start_date: NaiveUtcDatetime | None = None
    end_date: NaiveUtcDatetime | None = None

    @model_validator(mode="after")
    def validate_dates(self) -> "ContractCreate":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


class ContractUpdate(BaseModel):
    """Client edit of an active contract's terms; status has its own operation."""

    agreed_rate: float | None = Field(default=None, gt=0)
    terms: str | None = Field(default=None, max_length=10000)
    start_date: NaiveUtcDatetime | None = None
    end_date: NaiveUtcDatetime | None = None

    @field_validator("agreed_rate", "start_date")
    @classmethod
    def reject_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("Field cannot be null; omit it to leave it unchanged")
        return v


class ContractStatusUpdate(BaseModel):
    status: ContractStatus
