"""Model exports.

Import from here: `from src.marketplace.models import User, Project`
"""

# Enums
from src.marketplace.models.enums import (
    ContractStatus,
    NotificationType,
    ProjectStatus,
    ProjectType,
    ProposalStatus,
    Role,
)

# Tables
from src.marketplace.models.contract import Contract
from src.marketplace.models.notification import Notification
from src.marketplace.models.project import Project
from src.marketplace.models.proposal import Proposal
from src.marketplace.models.review import Review
from src.marketplace.models.user import PartnerProfile, User

__all__ = [
    # Enums
    "ContractStatus",
    "NotificationType",
    "ProjectStatus",
    "ProjectType",
    "ProposalStatus",
    "Role",
    # Tables
    "Contract",
    "Notification",
    "PartnerProfile",
    "Project",
    "Proposal",
    "Review",
    "User",
]
