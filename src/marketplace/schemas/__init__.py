from src.marketplace.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
)
from src.marketplace.schemas.contract import (
    ContractCreate,
    ContractStatusUpdate,
    ContractUpdate,
)
from src.marketplace.schemas.identity import Identity
from src.marketplace.schemas.partner import PartnerFilters, PartnerProfileUpsert
from src.marketplace.schemas.project import ProjectCreate, ProjectFilters, ProjectUpdate
from src.marketplace.schemas.proposal import (
    ProposalCreate,
    ProposalStatusUpdate,
    ProposalUpdate,
)
from src.marketplace.schemas.review import ReviewCreate, ReviewUpdate
from src.marketplace.schemas.user import UserProfileUpdate

__all__ = [
    # Auth
    "ChangePasswordRequest",
    "Identity",
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    # Partner
    "PartnerFilters",
    "PartnerProfileUpsert",
    # Project
    "ProjectCreate",
    "ProjectFilters",
    "ProjectUpdate",
    # Proposal
    "ProposalCreate",
    "ProposalStatusUpdate",
    "ProposalUpdate",
    # Contract
    "ContractCreate",
    "ContractStatusUpdate",
    "ContractUpdate",
    # Review
    "ReviewCreate",
    "ReviewUpdate",
    # User
    "UserProfileUpdate",
]
