"""Test helper functions for common data creation patterns."""

from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from src.marketplace.core.security import create_access_token
from src.marketplace.models import (
    Contract,
    ContractStatus,
    PartnerProfile,
    Project,
    ProjectStatus,
    Proposal,
    ProposalStatus,
    User,
)
from src.marketplace.repositories import (
    ContractRepository,
    NotificationRepository,
    PartnerProfileRepository,
    ProjectRepository,
    ProposalRepository,
    ReviewRepository,
)
from src.marketplace.services import (
    ContractService,
    NotificationService,
    ProjectService,
    ProposalService,
    ReviewService,
)
from tests.factories import (
    ContractFactory,
    PartnerProfileFactory,
    ProjectFactory,
    ProposalFactory,
    UserFactory,
)


async def create_client(session: AsyncSession, **user_kwargs) -> User:
    """Create and commit a client user."""
    user = UserFactory.client(**user_kwargs)
    session.add(user)
    await session.commit()
    return user


async def create_partner(
    session: AsyncSession, **user_kwargs
) -> tuple[User, PartnerProfile]:
    """Create and commit a partner user with their profile.

    Returns:
        Tuple of (user, profile)
    """
    user = UserFactory.partner(**user_kwargs)
    session.add(user)
    await session.flush()

    profile = PartnerProfileFactory.build(user_id=user.id)
    session.add(profile)
    await session.commit()
    return user, profile


async def create_project(
    session: AsyncSession,
    client: User,
    status: ProjectStatus = ProjectStatus.OPEN,
    **kwargs,
) -> Project:
    project = ProjectFactory.build(client_id=client.id, status=status.value, **kwargs)
    session.add(project)
    await session.commit()
    return project


async def create_proposal(
    session: AsyncSession,
    project: Project,
    profile: PartnerProfile,
    status: ProposalStatus = ProposalStatus.PENDING,
    **kwargs,
) -> Proposal:
    proposal = ProposalFactory.build(
        project_id=project.id, partner_id=profile.id, status=status.value, **kwargs
    )
    session.add(proposal)
    await session.commit()
    return proposal


async def create_contract(
    session: AsyncSession,
    project: Project,
    profile: PartnerProfile,
    status: ContractStatus = ContractStatus.ACTIVE,
    **kwargs,
) -> Contract:
    """Insert a contract directly, bypassing the workflow.

    Callers set the project status to match (e.g. in_progress for an active contract).
    """
    contract = ContractFactory.build(
        project_id=project.id, partner_id=profile.id, status=status.value, **kwargs
    )
    session.add(contract)
    await session.commit()
    return contract


async def count(session: AsyncSession, model: type[SQLModel], *criteria) -> int:
    """Count committed rows of `model` matching criteria."""
    query = select(func.count()).select_from(model)
    if criteria:
        query = query.where(*criteria)
    result = await session.execute(query)
    return int(result.scalar_one())


def bearer(user: User) -> dict[str, str]:
    """Authorization header for a user."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@dataclass
class Workflow:
    """The workflow services wired over one session, as a request would see them."""

    projects: ProjectService
    proposals: ProposalService
    contracts: ContractService
    reviews: ReviewService


def make_notifier(session: AsyncSession) -> NotificationService:
    return NotificationService(NotificationRepository(session), session)


def make_workflow(
    session: AsyncSession, notifier: NotificationService | None = None
) -> Workflow:
    project_repo = ProjectRepository(session)
    proposal_repo = ProposalRepository(session)
    partner_repo = PartnerProfileRepository(session)
    contract_repo = ContractRepository(session)
    return Workflow(
        projects=ProjectService(project_repo, proposal_repo, session),
        proposals=ProposalService(proposal_repo, project_repo, partner_repo, session, notifier),
        contracts=ContractService(
            contract_repo, project_repo, proposal_repo, partner_repo, session, notifier
        ),
        reviews=ReviewService(
            ReviewRepository(session),
            contract_repo,
            project_repo,
            partner_repo,
            session,
            notifier,
        ),
    )
