"""Account profile schemas."""

from pydantic import BaseModel, Field, field_validator


class UserProfileUpdate(BaseModel):
    """Partial edit of the caller's own account; phone and avatar may be cleared."""

    full_name: str | None = Field(default=None, min_length=1, max_length=100)
    phone: str | None = Field(default=None, max_length=30)
    avatar_url: str | None = Field(default=None, max_length=500)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("full_name cannot be null; omit it to leave it unchanged")
        v = v.strip()
        if not v:
            raise ValueError("full_name cannot be empty or whitespace only")
        return v
