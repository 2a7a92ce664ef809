"""Proposal rules: submission, client decisions, partner edits and withdrawal."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace.core.db import transaction
from src.marketplace.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
)
from src.marketplace.core.logging import get_logger
from src.marketplace.models import (
    NotificationType,
    PartnerProfile,
    Project,
    ProjectStatus,
    Proposal,
    ProposalStatus,
)
from src.marketplace.repositories import (
    PartnerProfileRepository,
    ProjectRepository,
    ProposalRepository,
)
from src.marketplace.schemas.proposal import ProposalCreate, ProposalUpdate
from src.marketplace.services.notification_service import NotificationService

logger = get_logger(__name__)

# Client decisions. Withdrawal is a partner action and goes through withdraw_proposal.
PROPOSAL_TRANSITIONS: dict[ProposalStatus, frozenset[ProposalStatus]] = {
    ProposalStatus.PENDING: frozenset({ProposalStatus.ACCEPTED, ProposalStatus.REJECTED}),
    ProposalStatus.ACCEPTED: frozenset(),
    ProposalStatus.REJECTED: frozenset(),
    ProposalStatus.WITHDRAWN: frozenset(),
}

_DECISION_NOTIFICATIONS = {
    ProposalStatus.ACCEPTED: NotificationType.PROPOSAL_ACCEPTED,
    ProposalStatus.REJECTED: NotificationType.PROPOSAL_REJECTED,
}


class ProposalService:
    def __init__(
        self,
        proposal_repo: ProposalRepository,
        project_repo: ProjectRepository,
        partner_repo: PartnerProfileRepository,
        session: AsyncSession,
        notifier: NotificationService | None = None,
    ):
        self.proposal_repo = proposal_repo
        self.project_repo = project_repo
        self.partner_repo = partner_repo
        self.session = session
        self.notifier = notifier

    async def _get_partner_profile(self, user_id: UUID) -> PartnerProfile:
        profile = await self.partner_repo.get_by_user_id(user_id)
        if profile is None:
            raise NotFoundError("PartnerProfile", "Partner profile not found")
        return profile

    async def _get_proposal(self, proposal_id: UUID) -> Proposal:
        proposal = await self.proposal_repo.get_by_id(proposal_id)
        if proposal is None:
            raise NotFoundError("Proposal", "Proposal not found")
        return proposal

    async def _get_project(self, project_id: UUID) -> Project:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project", "Project not found")
        return project

    async def _get_own_pending(self, user_id: UUID, proposal_id: UUID) -> Proposal:
        proposal = await self._get_proposal(proposal_id)
        profile = await self.partner_repo.get_by_user_id(user_id)
        if profile is None or proposal.partner_id != profile.id:
            raise ForbiddenError("NotProposalOwner", "Only the proposing partner can do this")
        if proposal.status_enum != ProposalStatus.PENDING:
            raise InvalidStateError(
                "ProposalNotPending", "Only pending proposals can be changed"
            )
        return proposal

    async def submit_proposal(
        self, user_id: UUID, project_id: UUID, data: ProposalCreate
    ) -> Proposal:
        """Submit the calling partner's proposal on an open project.

        Raises:
            NotFoundError: "PartnerProfile" or "Project".
            InvalidStateError: "ProjectNotOpen".
            ConflictError: "DuplicateProposal" if a non-withdrawn proposal exists.
        """
        async with transaction(self.session):
            profile = await self._get_partner_profile(user_id)
            project = await self._get_project(project_id)
            if project.status_enum != ProjectStatus.OPEN:
                raise InvalidStateError("ProjectNotOpen", "Project is not accepting proposals")

            existing = await self.proposal_repo.get_active_for_partner(project_id, profile.id)
            if existing is not None:
                raise ConflictError(
                    "DuplicateProposal", "You already have a proposal on this project"
                )

            proposal = Proposal(
                project_id=project_id,
                partner_id=profile.id,
                cover_letter=data.cover_letter,
                proposed_rate=data.proposed_rate,
                estimated_duration_weeks=data.estimated_duration_weeks,
            )
            try:
                await self.proposal_repo.insert(proposal)
            except IntegrityError as e:
                # Lost a race against a concurrent submission for the same pair
                raise ConflictError(
                    "DuplicateProposal", "You already have a proposal on this project"
                ) from e

        logger.info(
            "Proposal submitted",
            proposal_id=str(proposal.id),
            project_id=str(project_id),
            partner_id=str(profile.id),
        )
        if self.notifier:
            await self.notifier.notify(
                project.client_id,
                NotificationType.PROPOSAL_SUBMITTED,
                "New proposal",
                f'A partner submitted a proposal on "{project.title}"',
                link=f"/projects/{project_id}/proposals/{proposal.id}",
            )
        return proposal

    async def update_proposal_status(
        self, actor_id: UUID, proposal_id: UUID, new_status: ProposalStatus
    ) -> Proposal:
        """Accept or reject a pending proposal as the project's client.

        Raises:
            NotFoundError, ForbiddenError, InvalidStateError("InvalidTransition")
        """
        async with transaction(self.session):
            proposal = await self._get_proposal(proposal_id)
            project = await self._get_project(proposal.project_id)
            if project.client_id != actor_id:
                raise ForbiddenError(
                    "NotProjectOwner", "Only the project owner can decide on proposals"
                )

            current = proposal.status_enum
            if new_status not in PROPOSAL_TRANSITIONS[current]:
                raise InvalidStateError(
                    "InvalidTransition",
                    f"Cannot move proposal from {current.value} to {new_status.value}",
                )
            await self.proposal_repo.update(proposal, {"status": new_status.value})
            partner = await self.partner_repo.get_by_id(proposal.partner_id)

        logger.info(
            "Proposal status changed",
            proposal_id=str(proposal_id),
            from_status=current.value,
            to_status=new_status.value,
        )
        if self.notifier and partner is not None:
            await self.notifier.notify(
                partner.user_id,
                _DECISION_NOTIFICATIONS[new_status],
                f"Proposal {new_status.value}",
                f'Your proposal on "{project.title}" was {new_status.value}',
                link=f"/projects/{project.id}/proposals/{proposal_id}",
            )
        return proposal

    async def edit_proposal(
        self, user_id: UUID, proposal_id: UUID, data: ProposalUpdate
    ) -> Proposal:
        """Edit the calling partner's pending proposal.

        Raises:
            NotFoundError, ForbiddenError, InvalidStateError("ProposalNotPending")
        """
        patch = data.model_dump(exclude_unset=True)
        async with transaction(self.session):
            proposal = await self._get_own_pending(user_id, proposal_id)
            await self.proposal_repo.update(proposal, patch)

        logger.info("Proposal edited", proposal_id=str(proposal_id), fields=sorted(patch))
        return proposal

    async def withdraw_proposal(self, user_id: UUID, proposal_id: UUID) -> Proposal:
        """Withdraw the calling partner's pending proposal.

        Raises:
            NotFoundError, ForbiddenError, InvalidStateError("ProposalNotPending")
        """
        async with transaction(self.session):
            proposal = await self._get_own_pending(user_id, proposal_id)
            await self.proposal_repo.update(
                proposal, {"status": ProposalStatus.WITHDRAWN.value}
            )

        logger.info("Proposal withdrawn", proposal_id=str(proposal_id))
        return proposal

    async def get_proposal(self, user_id: UUID, proposal_id: UUID) -> Proposal:
        """Get a proposal visible to its partner or the project's client."""
        proposal = await self._get_proposal(proposal_id)
        project = await self._get_project(proposal.project_id)
        if project.client_id == user_id:
            return proposal
        profile = await self.partner_repo.get_by_user_id(user_id)
        if profile is not None and profile.id == proposal.partner_id:
            return proposal
        raise ForbiddenError("NotProposalParty", "Not allowed to view this proposal")

    async def list_project_proposals(
        self,
        user_id: UUID,
        project_id: UUID,
        status: ProposalStatus | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[Proposal], str | None, bool]:
        """List proposals on a project. Only the project's client may list them."""
        project = await self._get_project(project_id)
        if project.client_id != user_id:
            raise ForbiddenError(
                "NotProjectOwner", "Only the project owner can list its proposals"
            )
        return await self.proposal_repo.list_by_project(
            project_id, status=status, cursor=cursor, limit=limit
        )

    async def list_partner_proposals(
        self,
        user_id: UUID,
        status: ProposalStatus | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[Proposal], str | None, bool]:
        """List the calling partner's own proposals."""
        profile = await self._get_partner_profile(user_id)
        return await self.proposal_repo.list_by_partner(
            profile.id, status=status, cursor=cursor, limit=limit
        )
