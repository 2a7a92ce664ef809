"""Tests for registration, login and password changes."""

from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace.core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
)
from src.marketplace.core.security import verify_password, verify_token
from src.marketplace.models import PartnerProfile, Role, User
from src.marketplace.repositories import PartnerProfileRepository, UserRepository
from src.marketplace.schemas import ChangePasswordRequest, RegisterRequest
from src.marketplace.services import AuthService
from tests.factories import DEFAULT_TEST_PASSWORD
from tests.helpers import count, create_client

pytestmark = pytest.mark.integration

NEW_PASSWORD = "purple-elephant-dances-at-noon-7"


@pytest.fixture
def auth_service(session: AsyncSession) -> AuthService:
    return AuthService(UserRepository(session), PartnerProfileRepository(session), session)


class TestRegister:
    async def test_register_client(self, auth_service: AuthService, db_session: AsyncSession):
        registration = await auth_service.register(
            RegisterRequest(
                email="Alice@Example.com",
                password=DEFAULT_TEST_PASSWORD,
                full_name="Alice",
            )
        )

        user = registration.user
        assert user.email == "alice@example.com"
        assert user.role == Role.CLIENT.value
        assert verify_password(DEFAULT_TEST_PASSWORD, user.hashed_password)
        assert verify_token(registration.tokens.access_token).subject_id == user.id
        assert registration.tokens.token_type == "bearer"
        assert await count(db_session, PartnerProfile, PartnerProfile.user_id == user.id) == 0

    async def test_register_partner_creates_profile(
        self, auth_service: AuthService, db_session: AsyncSession
    ):
        registration = await auth_service.register(
            RegisterRequest(
                email="bob@example.com",
                password=DEFAULT_TEST_PASSWORD,
                full_name="Bob",
                role=Role.PARTNER,
            )
        )

        assert registration.user.role == Role.PARTNER.value
        assert (
            await count(db_session, PartnerProfile, PartnerProfile.user_id == registration.user.id)
            == 1
        )

    async def test_duplicate_email_case_insensitive(
        self, auth_service: AuthService, db_session: AsyncSession
    ):
        await create_client(db_session, email="carol@example.com")

        with pytest.raises(ConflictError) as exc_info:
            await auth_service.register(
                RegisterRequest(
                    email="CAROL@example.com",
                    password=DEFAULT_TEST_PASSWORD,
                    full_name="Carol again",
                )
            )

        assert exc_info.value.code == "EmailAlreadyRegistered"
        assert await count(db_session, User, User.email == "carol@example.com") == 1


class TestLogin:
    async def test_login_success(self, auth_service: AuthService, db_session: AsyncSession):
        user = await create_client(db_session, email="dave@example.com")

        tokens = await auth_service.login("Dave@Example.com", DEFAULT_TEST_PASSWORD)

        assert verify_token(tokens.access_token).subject_id == user.id

    @pytest.mark.parametrize(
        ("email", "password"),
        [
            ("erin@example.com", "wrong-password-entirely"),
            ("nobody@example.com", DEFAULT_TEST_PASSWORD),
        ],
    )
    async def test_invalid_credentials(
        self, auth_service: AuthService, db_session: AsyncSession, email, password
    ):
        await create_client(db_session, email="erin@example.com")

        with pytest.raises(UnauthorizedError) as exc_info:
            await auth_service.login(email, password)
        assert exc_info.value.code == "InvalidCredentials"


class TestChangePassword:
    async def test_change_password(self, auth_service: AuthService, db_session: AsyncSession):
        user = await create_client(db_session)

        await auth_service.change_password(
            user.id,
            ChangePasswordRequest(
                current_password=DEFAULT_TEST_PASSWORD, new_password=NEW_PASSWORD
            ),
        )

        await db_session.refresh(user)
        assert verify_password(NEW_PASSWORD, user.hashed_password)
        tokens = await auth_service.login(user.email, NEW_PASSWORD)
        assert tokens.access_token

    async def test_wrong_current_password(
        self, auth_service: AuthService, db_session: AsyncSession
    ):
        user = await create_client(db_session)

        with pytest.raises(InvalidStateError) as exc_info:
            await auth_service.change_password(
                user.id,
                ChangePasswordRequest(
                    current_password="not-my-password", new_password=NEW_PASSWORD
                ),
            )

        assert exc_info.value.code == "InvalidCurrentPassword"
        await db_session.refresh(user)
        assert verify_password(DEFAULT_TEST_PASSWORD, user.hashed_password)

    async def test_unknown_user(self, auth_service: AuthService):
        with pytest.raises(NotFoundError):
            await auth_service.change_password(
                uuid4(),
                ChangePasswordRequest(
                    current_password=DEFAULT_TEST_PASSWORD, new_password=NEW_PASSWORD
                ),
            )

    async def test_logout_is_stateless(self, auth_service: AuthService, db_session):
        user = await create_client(db_session)
        tokens = await auth_service.login(user.email, DEFAULT_TEST_PASSWORD)

        await auth_service.logout(user.id)

        assert verify_token(tokens.access_token).subject_id == user.id
