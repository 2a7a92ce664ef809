"""Partner profile input schemas."""

from pydantic import BaseModel, Field


class PartnerProfileUpsert(BaseModel):
    bio: str | None = Field(default=None, max_length=2000)
    hourly_rate: float | None = Field(default=None, ge=0)
    available: bool = True
    experience_years: int | None = Field(default=None, ge=0, le=80)


class PartnerFilters(BaseModel):
    available: bool | None = None
    experience_min: int | None = Field(default=None, ge=0)
    hourly_rate_max: float | None = Field(default=None, ge=0)
