"""Authentication service - registration, login and password changes."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace.core.db import transaction
from src.marketplace.core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
)
from src.marketplace.core.logging import get_logger
from src.marketplace.core.security import (
    DUMMY_PASSWORD_HASH,
    create_access_token,
    hash_password,
    verify_password,
)
from src.marketplace.models import PartnerProfile, Role, User
from src.marketplace.repositories import PartnerProfileRepository, UserRepository
from src.marketplace.schemas.auth import ChangePasswordRequest, LoginResponse, RegisterRequest

logger = get_logger(__name__)


@dataclass(frozen=True)
class Registration:
    user: User
    tokens: LoginResponse


class AuthService:
    """Authentication service.

    Tokens are stateless access tokens; there is nothing to revoke on logout.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        partner_repo: PartnerProfileRepository,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.partner_repo = partner_repo
        self.session = session

    async def register(self, data: RegisterRequest) -> Registration:
        """Create an account and, for partners, an empty partner profile.

        Raises:
            ConflictError: "EmailAlreadyRegistered".
        """
        email = data.email.lower()
        async with transaction(self.session):
            if await self.user_repo.exists_by_email(email):
                raise ConflictError("EmailAlreadyRegistered", "Email already registered")

            user = User(
                email=email,
                hashed_password=hash_password(data.password),
                full_name=data.full_name,
                role=data.role.value,
            )
            try:
                await self.user_repo.insert(user)
            except IntegrityError as e:
                raise ConflictError(
                    "EmailAlreadyRegistered", "Email already registered"
                ) from e

            if data.role == Role.PARTNER:
                await self.partner_repo.insert(PartnerProfile(user_id=user.id))

        logger.info("User registered", user_id=str(user.id), role=user.role)
        tokens = LoginResponse(access_token=create_access_token(user.id))
        return Registration(user=user, tokens=tokens)

    async def login(self, email: str, password: str) -> LoginResponse:
        """Exchange credentials for an access token.

        Raises:
            UnauthorizedError: "InvalidCredentials" for unknown email or wrong password.
        """
        user = await self.user_repo.get_by_email(email.lower())

        # Always verify so response timing does not reveal whether the email exists
        password_hash = user.hashed_password if user else DUMMY_PASSWORD_HASH
        password_valid = verify_password(password, password_hash)

        if user is None or not password_valid:
            logger.info("Login failed", reason="invalid_credentials")
            raise UnauthorizedError("InvalidCredentials", "Invalid email or password")

        logger.info("User logged in", user_id=str(user.id))
        return LoginResponse(access_token=create_access_token(user.id))

    async def change_password(self, user_id: UUID, data: ChangePasswordRequest) -> None:
        """Replace the user's password after checking the current one.

        Raises:
            NotFoundError, InvalidStateError("InvalidCurrentPassword")
        """
        async with transaction(self.session):
            user = await self.user_repo.get_by_id(user_id)
            if user is None:
                raise NotFoundError("User", "User not found")
            if not verify_password(data.current_password, user.hashed_password):
                raise InvalidStateError(
                    "InvalidCurrentPassword", "Current password is incorrect"
                )
            await self.user_repo.update(
                user, {"hashed_password": hash_password(data.new_password)}
            )

        logger.info("Password changed", user_id=str(user_id))

    async def logout(self, user_id: UUID) -> None:
        """Stateless tokens cannot be revoked; clients discard them and they expire."""
        logger.info("User logged out", user_id=str(user_id))
