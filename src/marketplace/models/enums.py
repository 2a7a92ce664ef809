"""Shared enums for models."""

from enum import Enum


class Role(str, Enum):
    """User role, fixed at registration."""

    CLIENT = "client"
    PARTNER = "partner"
    ADMIN = "admin"


class ProjectType(str, Enum):
    FIXED = "fixed"
    HOURLY = "hourly"


class ProjectStatus(str, Enum):
    """Project lifecycle status."""

    DRAFT = "draft"
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ProposalStatus(str, Enum):
    """Proposal review status."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class ContractStatus(str, Enum):
    """Contract status."""

    ACTIVE = "active"
    COMPLETED = "completed"
    TERMINATED = "terminated"


class NotificationType(str, Enum):
    PROPOSAL_SUBMITTED = "proposal_submitted"
    PROPOSAL_ACCEPTED = "proposal_accepted"
    PROPOSAL_REJECTED = "proposal_rejected"
    CONTRACT_CREATED = "contract_created"
    CONTRACT_COMPLETED = "contract_completed"
    CONTRACT_TERMINATED = "contract_terminated"
    REVIEW_RECEIVED = "review_received"
