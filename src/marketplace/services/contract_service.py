"""Contract creation and lifecycle.

Creating a contract is the one transition that touches three record kinds:
the new contract, its project and the project's other pending proposals.
All three change in one transaction or none do.
"""

from uuid import UUID

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
    Contract,
    ContractStatus,
    NotificationType,
    PartnerProfile,
    Project,
    ProjectStatus,
    ProposalStatus,
    Role,
)
from src.marketplace.models.base import utc_now
from src.marketplace.repositories import (
    ContractRepository,
    PartnerProfileRepository,
    ProjectRepository,
    ProposalRepository,
)
from src.marketplace.schemas.contract import ContractCreate, ContractUpdate
from src.marketplace.schemas.identity import Identity
from src.marketplace.services.notification_service import NotificationService

logger = get_logger(__name__)

CONTRACT_TRANSITIONS: dict[ContractStatus, frozenset[ContractStatus]] = {
    ContractStatus.ACTIVE: frozenset({ContractStatus.COMPLETED, ContractStatus.TERMINATED}),
    ContractStatus.COMPLETED: frozenset(),
    ContractStatus.TERMINATED: frozenset(),
}

_STATUS_NOTIFICATIONS = {
    ContractStatus.COMPLETED: NotificationType.CONTRACT_COMPLETED,
    ContractStatus.TERMINATED: NotificationType.CONTRACT_TERMINATED,
}


class ContractService:
    def __init__(
        self,
        contract_repo: ContractRepository,
        project_repo: ProjectRepository,
        proposal_repo: ProposalRepository,
        partner_repo: PartnerProfileRepository,
        session: AsyncSession,
        notifier: NotificationService | None = None,
    ):
        self.contract_repo = contract_repo
        self.project_repo = project_repo
        self.proposal_repo = proposal_repo
        self.partner_repo = partner_repo
        self.session = session
        self.notifier = notifier

    async def _get_contract(self, contract_id: UUID) -> Contract:
        contract = await self.contract_repo.get_by_id(contract_id)
        if contract is None:
            raise NotFoundError("Contract", "Contract not found")
        return contract

    async def _get_parties(self, contract: Contract) -> tuple[Project, PartnerProfile]:
        project = await self.project_repo.get_by_id(contract.project_id)
        partner = await self.partner_repo.get_by_id(contract.partner_id)
        if project is None or partner is None:
            raise NotFoundError("Contract", "Contract parties not found")
        return project, partner

    async def create_contract(self, client_id: UUID, data: ContractCreate) -> Contract:
        """Hire a partner on an open project.

        Preconditions are checked in order and the first failure wins.
        On success the contract exists, the project is in_progress and every
        other pending proposal on the project is rejected.

        Raises:
            NotFoundError: Project, Proposal or "PartnerProfile" missing.
            ForbiddenError: Caller does not own the project.
            InvalidStateError: "ProjectNotOpen" or "ProposalNotAccepted".
            ConflictError: "PartnerMismatch" or "ProposalProjectMismatch".
        """
        async with transaction(self.session):
            project = await self.project_repo.get_for_update(data.project_id)
            if project is None:
                raise NotFoundError("Project", "Project not found")
            if project.client_id != client_id:
                raise ForbiddenError(
                    "NotProjectOwner", "Only the project owner can create contracts"
                )
            if project.status_enum != ProjectStatus.OPEN:
                raise InvalidStateError("ProjectNotOpen", "Project is not open")

            if data.proposal_id is not None:
                proposal = await self.proposal_repo.get_by_id(data.proposal_id)
                if proposal is None:
                    raise NotFoundError("Proposal", "Proposal not found")
                if proposal.status_enum != ProposalStatus.ACCEPTED:
                    raise InvalidStateError(
                        "ProposalNotAccepted", "Proposal must be accepted first"
                    )
                if proposal.partner_id != data.partner_id:
                    raise ConflictError(
                        "PartnerMismatch", "Proposal belongs to a different partner"
                    )
                if proposal.project_id != data.project_id:
                    raise ConflictError(
                        "ProposalProjectMismatch", "Proposal belongs to a different project"
                    )

            partner = await self.partner_repo.get_by_id(data.partner_id)
            if partner is None:
                raise NotFoundError("PartnerProfile", "Partner profile not found")

            contract = Contract(
                project_id=data.project_id,
                partner_id=data.partner_id,
                proposal_id=data.proposal_id,
                agreed_rate=data.agreed_rate,
                terms=data.terms,
                start_date=data.start_date or utc_now(),
                end_date=data.end_date,
            )
            await self.contract_repo.insert(contract)

            # Another creator may have claimed the project since it was read
            claimed = await self.project_repo.transition_status(
                data.project_id, ProjectStatus.OPEN, ProjectStatus.IN_PROGRESS
            )
            if not claimed:
                raise InvalidStateError("ProjectNotOpen", "Project is not open")

            rejected = await self.proposal_repo.reject_pending(
                data.project_id, exclude_id=data.proposal_id
            )

        logger.info(
            "Contract created",
            contract_id=str(contract.id),
            project_id=str(data.project_id),
            partner_id=str(data.partner_id),
            rejected_proposals=rejected,
        )
        if self.notifier:
            await self.notifier.notify(
                partner.user_id,
                NotificationType.CONTRACT_CREATED,
                "New contract",
                f'You were hired for "{project.title}"',
                link=f"/contracts/{contract.id}",
            )
        return contract

    async def update_contract_status(
        self, actor_id: UUID, contract_id: UUID, new_status: ContractStatus
    ) -> Contract:
        """Complete or terminate an active contract as one of its parties.

        Completing the contract completes its project in the same transaction.
        The status moves only if no concurrent change closed the contract first.

        Raises:
            NotFoundError, ForbiddenError, InvalidStateError("InvalidTransition")
        """
        async with transaction(self.session):
            contract = await self.contract_repo.get_for_update(contract_id)
            if contract is None:
                raise NotFoundError("Contract", "Contract not found")
            project, partner = await self._get_parties(contract)
            if actor_id not in (project.client_id, partner.user_id):
                raise ForbiddenError("NotContractParty", "Not a party to this contract")

            current = contract.status_enum
            if new_status not in CONTRACT_TRANSITIONS[current]:
                raise InvalidStateError(
                    "InvalidTransition",
                    f"Cannot move contract from {current.value} to {new_status.value}",
                )

            values = {"end_date": utc_now()} if new_status == ContractStatus.TERMINATED else {}
            moved = await self.contract_repo.transition_status(
                contract_id, current, new_status, **values
            )
            if not moved:
                raise InvalidStateError(
                    "InvalidTransition",
                    f"Contract is no longer {current.value}",
                )

            if new_status == ContractStatus.COMPLETED:
                completed = await self.project_repo.transition_status(
                    project.id, ProjectStatus.IN_PROGRESS, ProjectStatus.COMPLETED
                )
                if not completed:
                    raise InvalidStateError(
                        "ProjectNotInProgress", "Project is not in progress"
                    )
            await self.session.refresh(contract)

        logger.info(
            "Contract status changed",
            contract_id=str(contract_id),
            from_status=current.value,
            to_status=new_status.value,
        )
        if self.notifier:
            other_party = partner.user_id if actor_id == project.client_id else project.client_id
            await self.notifier.notify(
                other_party,
                _STATUS_NOTIFICATIONS[new_status],
                f"Contract {new_status.value}",
                f'The contract for "{project.title}" was {new_status.value}',
                link=f"/contracts/{contract_id}",
            )
        return contract

    async def update_contract(
        self, client_id: UUID, contract_id: UUID, data: ContractUpdate
    ) -> Contract:
        """Edit the rate, terms or dates of an active contract as its client.

        Raises:
            NotFoundError, ForbiddenError("NotProjectOwner"),
            InvalidStateError("ContractNotActive" or "InvalidDateRange")
        """
        patch = data.model_dump(exclude_unset=True)
        async with transaction(self.session):
            contract = await self.contract_repo.get_for_update(contract_id)
            if contract is None:
                raise NotFoundError("Contract", "Contract not found")
            project, _ = await self._get_parties(contract)
            if project.client_id != client_id:
                raise ForbiddenError(
                    "NotProjectOwner", "Only the client can edit the contract"
                )
            if contract.status_enum != ContractStatus.ACTIVE:
                raise InvalidStateError(
                    "ContractNotActive", "Only active contracts can be edited"
                )

            start_date = patch.get("start_date", contract.start_date)
            end_date = patch.get("end_date", contract.end_date)
            if end_date is not None and end_date < start_date:
                raise InvalidStateError(
                    "InvalidDateRange", "end_date cannot be before start_date"
                )

            await self.contract_repo.update(contract, patch)

        logger.info("Contract updated", contract_id=str(contract_id), fields=sorted(patch))
        return contract

    async def get_contract(self, actor_id: UUID, contract_id: UUID) -> Contract:
        """Get a contract visible to its client or partner."""
        contract = await self._get_contract(contract_id)
        project, partner = await self._get_parties(contract)
        if actor_id not in (project.client_id, partner.user_id):
            raise ForbiddenError("NotContractParty", "Not a party to this contract")
        return contract

    async def list_contracts(
        self,
        identity: Identity,
        status: ContractStatus | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[Contract], str | None, bool]:
        """List contracts on the caller's side; admins see every contract."""
        if identity.role == Role.CLIENT:
            return await self.contract_repo.list_for_client(
                identity.id, status=status, cursor=cursor, limit=limit
            )
        if identity.role == Role.PARTNER:
            return await self.contract_repo.list_for_partner_user(
                identity.id, status=status, cursor=cursor, limit=limit
            )
        return await self.contract_repo.list_all(status=status, cursor=cursor, limit=limit)
