"""Service factory dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends

from src.marketplace.api.dependencies.db import DBSession
from src.marketplace.api.dependencies.repositories import (
    ContractRepo,
    NotificationRepo,
    PartnerProfileRepo,
    ProjectRepo,
    ProposalRepo,
    ReviewRepo,
    UserRepo,
)
from src.marketplace.core.db import get_session
from src.marketplace.repositories import NotificationRepository
from src.marketplace.services import (
    AuthService,
    ContractService,
    NotificationService,
    PartnerService,
    ProjectService,
    ProposalService,
    ReviewService,
    UserService,
)


async def get_notifier() -> AsyncGenerator[NotificationService]:
    """Get a notification service with its own isolated session.

    Uses a dedicated session that commits independently from business transactions.
    """
    async with get_session() as session:
        yield NotificationService(NotificationRepository(session), session)


Notifier = Annotated[NotificationService, Depends(get_notifier)]


def get_notification_service(
    notification_repo: NotificationRepo, session: DBSession
) -> NotificationService:
    """Get notification service on the request session (for reads and mark-read)."""
    return NotificationService(notification_repo, session)


def get_auth_service(
    user_repo: UserRepo, partner_repo: PartnerProfileRepo, session: DBSession
) -> AuthService:
    return AuthService(user_repo, partner_repo, session)


def get_partner_service(
    partner_repo: PartnerProfileRepo, user_repo: UserRepo, session: DBSession
) -> PartnerService:
    return PartnerService(partner_repo, user_repo, session)


def get_project_service(
    project_repo: ProjectRepo, proposal_repo: ProposalRepo, session: DBSession
) -> ProjectService:
    return ProjectService(project_repo, proposal_repo, session)


def get_proposal_service(
    proposal_repo: ProposalRepo,
    project_repo: ProjectRepo,
    partner_repo: PartnerProfileRepo,
    session: DBSession,
    notifier: Notifier,
) -> ProposalService:
    return ProposalService(proposal_repo, project_repo, partner_repo, session, notifier)


def get_contract_service(
    contract_repo: ContractRepo,
    project_repo: ProjectRepo,
    proposal_repo: ProposalRepo,
    partner_repo: PartnerProfileRepo,
    session: DBSession,
    notifier: Notifier,
) -> ContractService:
    return ContractService(
        contract_repo, project_repo, proposal_repo, partner_repo, session, notifier
    )


def get_review_service(
    review_repo: ReviewRepo,
    contract_repo: ContractRepo,
    project_repo: ProjectRepo,
    partner_repo: PartnerProfileRepo,
    session: DBSession,
    notifier: Notifier,
) -> ReviewService:
    return ReviewService(
        review_repo, contract_repo, project_repo, partner_repo, session, notifier
    )


def get_user_service(
    user_repo: UserRepo,
    partner_repo: PartnerProfileRepo,
    project_repo: ProjectRepo,
    proposal_repo: ProposalRepo,
    contract_repo: ContractRepo,
    session: DBSession,
) -> UserService:
    return UserService(
        user_repo, partner_repo, project_repo, proposal_repo, contract_repo, session
    )


NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
PartnerServiceDep = Annotated[PartnerService, Depends(get_partner_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
ProposalServiceDep = Annotated[ProposalService, Depends(get_proposal_service)]
ContractServiceDep = Annotated[ContractService, Depends(get_contract_service)]
ReviewServiceDep = Annotated[ReviewService, Depends(get_review_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
