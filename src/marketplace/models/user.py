"""User and partner profile models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.marketplace.models.base import utc_now
from src.marketplace.models.enums import Role


class User(SQLModel, table=True):
    """Registered account. The role never changes after registration."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    hashed_password: str = Field(max_length=255)
    full_name: str = Field(max_length=100)
    phone: str | None = Field(default=None, max_length=30)
    avatar_url: str | None = Field(default=None, max_length=500)
    role: str = Field(default=Role.CLIENT.value, max_length=20)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def role_enum(self) -> Role:
        """Get role as Role enum."""
        return Role(self.role)


class PartnerProfile(SQLModel, table=True):
    """Partner-facing profile, owned 1:1 by a user with the partner role."""

    __tablename__ = "partner_profiles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", unique=True, index=True)
    bio: str | None = Field(default=None, max_length=2000)
    hourly_rate: float | None = Field(default=None, ge=0)
    available: bool = Field(default=True)
    experience_years: int | None = Field(default=None, ge=0)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
