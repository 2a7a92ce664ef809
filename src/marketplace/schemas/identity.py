"""Authenticated caller context passed into business operations."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from src.marketplace.models.enums import Role


class Identity(BaseModel):
    """Verified representation of the request's caller."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    email: str
    full_name: str
    role: Role
