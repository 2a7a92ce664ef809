"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, ProjectFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.marketplace import (
    ContractFactory,
    NotificationFactory,
    ProjectFactory,
    ProposalFactory,
    ReviewFactory,
)
from tests.factories.user import DEFAULT_TEST_PASSWORD, PartnerProfileFactory, UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # User
    "DEFAULT_TEST_PASSWORD",
    "PartnerProfileFactory",
    "UserFactory",
    # Marketplace
    "ContractFactory",
    "NotificationFactory",
    "ProjectFactory",
    "ProposalFactory",
    "ReviewFactory",
]
