"""Authentication and authorization dependencies."""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Header

from src.marketplace.api.dependencies.repositories import UserRepo
from src.marketplace.models import Role
from src.marketplace.schemas.identity import Identity
from src.marketplace.services.auth_guard import AuthGuard


def get_auth_guard(user_repo: UserRepo) -> AuthGuard:
    return AuthGuard(user_repo)


AuthGuardDep = Annotated[AuthGuard, Depends(get_auth_guard)]


async def get_current_identity(
    guard: AuthGuardDep,
    authorization: Annotated[str | None, Header()] = None,
) -> Identity:
    """Validate the bearer token and return the caller. Failures become 401 responses."""
    return await guard.authenticate(authorization)


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]


async def get_optional_identity(
    guard: AuthGuardDep,
    authorization: Annotated[str | None, Header()] = None,
) -> Identity | None:
    """Return the caller if a valid token was sent, None otherwise."""
    return await guard.authenticate_optional(authorization)


OptionalIdentity = Annotated[Identity | None, Depends(get_optional_identity)]


def require_roles(*roles: Role) -> Callable[[Identity], Awaitable[Identity]]:
    """Build a dependency that admits only identities holding one of `roles`.

    Usage:
        @router.post("/projects")
        async def create(identity: Annotated[Identity, Depends(require_roles(Role.CLIENT))]):
            ...
    """
    allowed = frozenset(roles)

    async def _require_roles(identity: CurrentIdentity) -> Identity:
        return AuthGuard.require_role(identity, allowed)

    return _require_roles


ClientIdentity = Annotated[Identity, Depends(require_roles(Role.CLIENT))]
PartnerIdentity = Annotated[Identity, Depends(require_roles(Role.PARTNER))]
AdminIdentity = Annotated[Identity, Depends(require_roles(Role.ADMIN))]
