"""Review input schemas. Rating bounds are enforced here, not in the services."""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class ReviewCreate(BaseModel):
    contract_id: UUID
    reviewee_id: UUID
    rating: int = Field(ge=1, le=5)
    comment: str | None = Field(default=None, max_length=2000)


class ReviewUpdate(BaseModel):
    rating: int | None = Field(default=None, ge=1, le=5)
    comment: str | None = Field(default=None, max_length=2000)

    @field_validator("rating")
    @classmethod
    def reject_null(cls, v: int | None) -> int | None:
        if v is None:
            raise ValueError("Rating cannot be null; omit it to leave it unchanged")
        return v
