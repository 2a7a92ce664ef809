"""Repository layer - data access abstraction."""

from src.marketplace.repositories.base import BaseRepository
from src.marketplace.repositories.contract import ContractRepository
from src.marketplace.repositories.notification import NotificationRepository
from src.marketplace.repositories.project import ProjectRepository
from src.marketplace.repositories.proposal import ProposalRepository
from src.marketplace.repositories.review import ReviewRepository
from src.marketplace.repositories.user import PartnerProfileRepository, UserRepository

__all__ = [
    "BaseRepository",
    "ContractRepository",
    "NotificationRepository",
    "PartnerProfileRepository",
    "ProjectRepository",
    "ProposalRepository",
    "ReviewRepository",
    "UserRepository",
]
