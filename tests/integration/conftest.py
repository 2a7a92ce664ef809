"""Integration test fixtures: wired services and a cast of marketplace users.

The database is an in-memory SQLite schema built from the model metadata
(see tests/conftest.py), so these tests need no external services.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace.models import PartnerProfile, Project, User
from src.marketplace.services import NotificationService
from tests.helpers import (
    Workflow,
    create_client,
    create_partner,
    create_project,
    make_notifier,
    make_workflow,
)


@pytest.fixture
def notifier(notifier_session: AsyncSession) -> NotificationService:
    return make_notifier(notifier_session)


@pytest.fixture
def workflow(session: AsyncSession, notifier: NotificationService) -> Workflow:
    return make_workflow(session, notifier)


@pytest.fixture
async def client_user(db_session: AsyncSession) -> User:
    """Client C: owns the projects under test."""
    return await create_client(db_session, full_name="Client C")


@pytest.fixture
async def partner_x(db_session: AsyncSession) -> tuple[User, PartnerProfile]:
    return await create_partner(db_session, full_name="Partner X")


@pytest.fixture
async def partner_y(db_session: AsyncSession) -> tuple[User, PartnerProfile]:
    return await create_partner(db_session, full_name="Partner Y")


@pytest.fixture
async def outsider(db_session: AsyncSession) -> User:
    """Identity Z: a client with no stake in the projects under test."""
    return await create_client(db_session, full_name="Outsider Z")


@pytest.fixture
async def open_project(db_session: AsyncSession, client_user: User) -> Project:
    return await create_project(db_session, client_user)
