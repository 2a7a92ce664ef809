from src.marketplace.services.auth_guard import AuthGuard
from src.marketplace.services.auth_service import AuthService
from src.marketplace.services.contract_service import ContractService
from src.marketplace.services.notification_service import NotificationService
from src.marketplace.services.partner_service import PartnerService
from src.marketplace.services.project_service import ProjectService
from src.marketplace.services.proposal_service import ProposalService
from src.marketplace.services.review_service import ReviewService
from src.marketplace.services.user_service import UserService

__all__ = [
    "AuthGuard",
    "AuthService",
    "ContractService",
    "NotificationService",
    "PartnerService",
    "ProjectService",
    "ProposalService",
    "ReviewService",
    "UserService",
]
