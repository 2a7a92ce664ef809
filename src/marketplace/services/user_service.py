"""The caller's own account: profile and activity summary."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace.core.db import transaction
from src.marketplace.core.exceptions import NotFoundError
from src.marketplace.core.logging import get_logger
from src.marketplace.models import (
    Contract,
    ContractStatus,
    PartnerProfile,
    Project,
    ProjectStatus,
    Proposal,
    ProposalStatus,
    Role,
    User,
)
from src.marketplace.repositories import (
    ContractRepository,
    PartnerProfileRepository,
    ProjectRepository,
    ProposalRepository,
    UserRepository,
)
from src.marketplace.schemas.user import UserProfileUpdate

logger = get_logger(__name__)


@dataclass(frozen=True)
class Me:
    user: User
    partner_profile: PartnerProfile | None


@dataclass(frozen=True)
class UserStats:
    """Activity counters. For partners, `total_projects` counts proposals sent
    and `in_progress` counts active contracts."""

    total_projects: int = 0
    in_progress: int = 0
    completed: int = 0
    total_spent: float = 0.0
    total_earnings: float = 0.0
    pending_proposals: int = 0


class UserService:
    def __init__(
        self,
        user_repo: UserRepository,
        partner_repo: PartnerProfileRepository,
        project_repo: ProjectRepository,
        proposal_repo: ProposalRepository,
        contract_repo: ContractRepository,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.partner_repo = partner_repo
        self.project_repo = project_repo
        self.proposal_repo = proposal_repo
        self.contract_repo = contract_repo
        self.session = session

    async def _get_user(self, user_id: UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", "User not found")
        return user

    async def get_me(self, user_id: UUID) -> Me:
        """The caller's account with their partner profile, if any."""
        user = await self._get_user(user_id)
        profile = None
        if user.role_enum == Role.PARTNER:
            profile = await self.partner_repo.get_by_user_id(user_id)
        return Me(user=user, partner_profile=profile)

    async def update_profile(self, user_id: UUID, data: UserProfileUpdate) -> User:
        """Patch the caller's name and contact details. Email and role are fixed."""
        patch = data.model_dump(exclude_unset=True)
        async with transaction(self.session):
            user = await self._get_user(user_id)
            await self.user_repo.update(user, patch)

        logger.info("Profile updated", user_id=str(user_id), fields=sorted(patch))
        return user

    async def get_stats(self, user_id: UUID) -> UserStats:
        user = await self._get_user(user_id)

        if user.role_enum == Role.CLIENT:
            owned = Project.client_id == user_id
            return UserStats(
                total_projects=await self.project_repo.count(owned),
                in_progress=await self.project_repo.count(
                    owned, Project.status == ProjectStatus.IN_PROGRESS.value
                ),
                completed=await self.project_repo.count(
                    owned, Project.status == ProjectStatus.COMPLETED.value
                ),
                total_spent=await self.contract_repo.total_rate_for_client(user_id),
            )

        if user.role_enum == Role.PARTNER:
            profile = await self.partner_repo.get_by_user_id(user_id)
            if profile is None:
                return UserStats()
            held = Contract.partner_id == profile.id
            sent = Proposal.partner_id == profile.id
            return UserStats(
                total_projects=await self.proposal_repo.count(sent),
                in_progress=await self.contract_repo.count(
                    held, Contract.status == ContractStatus.ACTIVE.value
                ),
                completed=await self.contract_repo.count(
                    held, Contract.status == ContractStatus.COMPLETED.value
                ),
                total_earnings=await self.contract_repo.total_rate_for_partner(profile.id),
                pending_proposals=await self.proposal_repo.count(
                    sent, Proposal.status == ProposalStatus.PENDING.value
                ),
            )

        return UserStats()
