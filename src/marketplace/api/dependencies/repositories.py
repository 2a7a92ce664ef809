"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.marketplace.api.dependencies.db import DBSession
from src.marketplace.repositories import (
    ContractRepository,
    NotificationRepository,
    PartnerProfileRepository,
    ProjectRepository,
    ProposalRepository,
    ReviewRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_partner_profile_repository(session: DBSession) -> PartnerProfileRepository:
    return PartnerProfileRepository(session)


def get_project_repository(session: DBSession) -> ProjectRepository:
    return ProjectRepository(session)


def get_proposal_repository(session: DBSession) -> ProposalRepository:
    return ProposalRepository(session)


def get_contract_repository(session: DBSession) -> ContractRepository:
    return ContractRepository(session)


def get_review_repository(session: DBSession) -> ReviewRepository:
    return ReviewRepository(session)


def get_notification_repository(session: DBSession) -> NotificationRepository:
    return NotificationRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
PartnerProfileRepo = Annotated[PartnerProfileRepository, Depends(get_partner_profile_repository)]
ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
ProposalRepo = Annotated[ProposalRepository, Depends(get_proposal_repository)]
ContractRepo = Annotated[ContractRepository, Depends(get_contract_repository)]
ReviewRepo = Annotated[ReviewRepository, Depends(get_review_repository)]
NotificationRepo = Annotated[NotificationRepository, Depends(get_notification_repository)]
