"""Request authentication and role checks.

AuthGuard turns the raw `Authorization` header into an `Identity`.
It reads users, never writes them.
"""

from collections.abc import Collection

from src.marketplace.core.exceptions import ForbiddenError, UnauthorizedError
from src.marketplace.core.logging import bind_user_context, get_logger
from src.marketplace.core.security import verify_token
from src.marketplace.models import Role
from src.marketplace.repositories import UserRepository
from src.marketplace.schemas.identity import Identity

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token part of a bearer header.

    Raises:
        UnauthorizedError: "MissingToken" if the header is absent, not bearer, or empty.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise UnauthorizedError("MissingToken", "Missing or invalid authorization header")
    token = authorization[len(BEARER_PREFIX) :].strip()
    if not token:
        raise UnauthorizedError("MissingToken", "Missing or invalid authorization header")
    return token


class AuthGuard:
    """Authenticates bearer tokens against the user store."""

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def authenticate(self, authorization: str | None) -> Identity:
        """Validate the bearer token and return the caller's identity.

        Raises:
            UnauthorizedError: MissingToken, InvalidToken, TokenExpired or UserNotFound.
        """
        token = extract_bearer_token(authorization)
        claims = verify_token(token)

        user = await self.user_repo.get_by_id(claims.subject_id)
        if user is None:
            logger.info("Token subject not found", user_id=str(claims.subject_id))
            raise UnauthorizedError("UserNotFound", "User not found")

        identity = Identity.model_validate(user)
        bind_user_context(identity.id, identity.role.value, identity.email)
        return identity

    async def authenticate_optional(self, authorization: str | None) -> Identity | None:
        """Like `authenticate`, but any authentication failure yields None."""
        if not authorization:
            return None
        try:
            return await self.authenticate(authorization)
        except UnauthorizedError as e:
            logger.debug("Optional authentication skipped", code=e.code)
            return None

    @staticmethod
    def require_role(identity: Identity, allowed_roles: Collection[Role]) -> Identity:
        """Check the identity's role.

        Raises:
            ForbiddenError: "InsufficientRole" if the role is not allowed.
        """
        if identity.role not in allowed_roles:
            raise ForbiddenError(
                "InsufficientRole",
                f"Requires one of: {', '.join(sorted(r.value for r in allowed_roles))}",
            )
        return identity
