"""Cryptographic utilities - password hashing and JWT access tokens."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import argon2
from jose import ExpiredSignatureError, JWTError, jwt

from src.marketplace.core.config import get_settings
from src.marketplace.core.exceptions import UnauthorizedError

ACCESS_TOKEN_TYPE = "access"


def _create_password_hasher() -> argon2.PasswordHasher:
    """Create password hasher with settings from config."""
    settings = get_settings()
    return argon2.PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )


_password_hasher = _create_password_hasher()


def hash_password(password: str) -> str:
    """Hash password using Argon2id."""
    return _password_hasher.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify password against hash. Returns False on any error."""
    try:
        _password_hasher.verify(hashed, password)
        return True
    except argon2.exceptions.VerifyMismatchError:
        return False
    except argon2.exceptions.InvalidHashError:
        return False


# Verified against when the email is unknown so login timing does not leak account existence
DUMMY_PASSWORD_HASH = hash_password("dummy-password-for-timing-safety")


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims of an access token."""

    subject_id: UUID
    issued_at: datetime | None
    expires_at: datetime


def create_access_token(
    subject: str | UUID,
    expires_delta: timedelta | None = None,
) -> str:
    """Create JWT access token."""
    settings = get_settings()

    now = datetime.now(UTC)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode = {
        "sub": str(subject),
        "iat": now,
        "exp": expire,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(  # type: ignore[no-any-return]
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT signature and expiry.

    Raises:
        UnauthorizedError: "TokenExpired" when past exp, "InvalidToken" otherwise.
    """
    settings = get_settings()
    try:
        return jwt.decode(  # type: ignore[no-any-return]
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError as e:
        raise UnauthorizedError("TokenExpired", "Token expired") from e
    except JWTError as e:
        raise UnauthorizedError("InvalidToken", "Invalid token") from e


def verify_token(token: str) -> TokenClaims:
    """Verify an access token and return its claims.

    Raises:
        UnauthorizedError: On bad signature, expiry, wrong token type or bad subject.
    """
    payload = decode_token(token)

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise UnauthorizedError("InvalidToken", "Invalid token type")

    subject = payload.get("sub")
    if not subject:
        raise UnauthorizedError("InvalidToken", "Invalid token payload")

    try:
        subject_id = UUID(subject)
    except ValueError as e:
        raise UnauthorizedError("InvalidToken", "Invalid subject in token") from e

    expires_at = payload.get("exp")
    if expires_at is None:
        raise UnauthorizedError("InvalidToken", "Invalid token payload")

    issued_at = payload.get("iat")
    return TokenClaims(
        subject_id=subject_id,
        issued_at=datetime.fromtimestamp(issued_at, UTC) if issued_at else None,
        expires_at=datetime.fromtimestamp(expires_at, UTC),
    )
