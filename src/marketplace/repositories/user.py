"""Repositories for User and PartnerProfile entities."""

from uuid import UUID

from sqlmodel import select

from src.marketplace.models import PartnerProfile, User
from src.marketplace.repositories.base import BaseRepository
from src.marketplace.schemas.partner import PartnerFilters


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email address."""
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        """Check if a user with the given email exists."""
        user = await self.get_by_email(email)
        return user is not None


class PartnerProfileRepository(BaseRepository[PartnerProfile]):
    model = PartnerProfile

    async def get_by_user_id(self, user_id: UUID) -> PartnerProfile | None:
        result = await self.session.execute(
            select(PartnerProfile).where(PartnerProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def list_filtered(
        self,
        filters: PartnerFilters,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[PartnerProfile], str | None, bool]:
        """List partner profiles matching browse filters."""
        query = select(PartnerProfile)
        if filters.available is not None:
            query = query.where(PartnerProfile.available == filters.available)
        if filters.experience_min is not None:
            query = query.where(PartnerProfile.experience_years >= filters.experience_min)
        if filters.hourly_rate_max is not None:
            query = query.where(PartnerProfile.hourly_rate <= filters.hourly_rate_max)
        return await self.paginate(query, cursor, limit)
