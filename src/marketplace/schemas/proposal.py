"""Proposal input schemas."""

from pydantic import BaseModel, Field, field_validator

from src.marketplace.models.enums import ProposalStatus


class ProposalCreate(BaseModel):
    cover_letter: str = Field(min_length=1, max_length=5000)
    proposed_rate: float = Field(gt=0)
    estimated_duration_weeks: int | None = Field(default=None, ge=1)


class ProposalUpdate(BaseModel):
    """Partial edit of a pending proposal; the duration may be cleared with null."""

    cover_letter: str | None = Field(default=None, min_length=1, max_length=5000)
    proposed_rate: float | None = Field(default=None, gt=0)
    estimated_duration_weeks: int | None = Field(default=None, ge=1)

    @field_validator("cover_letter", "proposed_rate")
    @classmethod
    def reject_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("Field cannot be null; omit it to leave it unchanged")
        return v


class ProposalStatusUpdate(BaseModel):
    """Client decision on a proposal."""

    status: ProposalStatus
