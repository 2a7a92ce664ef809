"""FastAPI dependency injection definitions.

Re-exports all dependencies for the route layer.
"""

# Auth
from src.marketplace.api.dependencies.auth import (
    AdminIdentity,
    AuthGuardDep,
    ClientIdentity,
    CurrentIdentity,
    OptionalIdentity,
    PartnerIdentity,
    get_auth_guard,
    get_current_identity,
    get_optional_identity,
    require_roles,
)

# Database
from src.marketplace.api.dependencies.db import DBSession, get_db_session

# Repositories
from src.marketplace.api.dependencies.repositories import (
    ContractRepo,
    NotificationRepo,
    PartnerProfileRepo,
    ProjectRepo,
    ProposalRepo,
    ReviewRepo,
    UserRepo,
)

# Services
from src.marketplace.api.dependencies.services import (
    AuthServiceDep,
    ContractServiceDep,
    NotificationServiceDep,
    Notifier,
    PartnerServiceDep,
    ProjectServiceDep,
    ProposalServiceDep,
    ReviewServiceDep,
    UserServiceDep,
    get_notifier,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "AdminIdentity",
    "AuthGuardDep",
    "ClientIdentity",
    "CurrentIdentity",
    "OptionalIdentity",
    "PartnerIdentity",
    "get_auth_guard",
    "get_current_identity",
    "get_optional_identity",
    "require_roles",
    # Repositories
    "ContractRepo",
    "NotificationRepo",
    "PartnerProfileRepo",
    "ProjectRepo",
    "ProposalRepo",
    "ReviewRepo",
    "UserRepo",
    # Services
    "AuthServiceDep",
    "ContractServiceDep",
    "NotificationServiceDep",
    "Notifier",
    "PartnerServiceDep",
    "ProjectServiceDep",
    "ProposalServiceDep",
    "ReviewServiceDep",
    "UserServiceDep",
    "get_notifier",
]
