"""Partner profile management and browsing."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace.core.db import transaction
from src.marketplace.core.exceptions import ForbiddenError, NotFoundError
from src.marketplace.core.logging import get_logger
from src.marketplace.models import PartnerProfile, Role
from src.marketplace.repositories import PartnerProfileRepository, UserRepository
from src.marketplace.schemas.partner import PartnerFilters, PartnerProfileUpsert

logger = get_logger(__name__)


class PartnerService:
    def __init__(
        self,
        partner_repo: PartnerProfileRepository,
        user_repo: UserRepository,
        session: AsyncSession,
    ):
        self.partner_repo = partner_repo
        self.user_repo = user_repo
        self.session = session

    async def upsert_profile(self, user_id: UUID, data: PartnerProfileUpsert) -> PartnerProfile:
        """Create or replace the calling partner's profile.

        Raises:
            NotFoundError: User missing.
            ForbiddenError: "NotPartner" if the user is not a partner.
        """
        async with transaction(self.session):
            user = await self.user_repo.get_by_id(user_id)
            if user is None:
                raise NotFoundError("User", "User not found")
            if user.role_enum != Role.PARTNER:
                raise ForbiddenError("NotPartner", "Only partners have a partner profile")

            profile = await self.partner_repo.get_by_user_id(user_id)
            if profile is None:
                profile = PartnerProfile(user_id=user_id, **data.model_dump())
                await self.partner_repo.insert(profile)
                created = True
            else:
                await self.partner_repo.update(profile, data.model_dump())
                created = False

        logger.info(
            "Partner profile saved",
            user_id=str(user_id),
            profile_id=str(profile.id),
            created=created,
        )
        return profile

    async def get_profile(self, profile_id: UUID) -> PartnerProfile:
        profile = await self.partner_repo.get_by_id(profile_id)
        if profile is None:
            raise NotFoundError("PartnerProfile", "Partner profile not found")
        return profile

    async def get_my_profile(self, user_id: UUID) -> PartnerProfile:
        profile = await self.partner_repo.get_by_user_id(user_id)
        if profile is None:
            raise NotFoundError("PartnerProfile", "Partner profile not found")
        return profile

    async def list_partners(
        self,
        filters: PartnerFilters,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[PartnerProfile], str | None, bool]:
        return await self.partner_repo.list_filtered(filters, cursor=cursor, limit=limit)
