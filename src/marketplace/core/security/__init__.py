"""Security utilities - password hashing and access tokens.

Re-exports all security-related functions for convenience.
"""

from src.marketplace.core.security.crypto import (
    DUMMY_PASSWORD_HASH,
    TokenClaims,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
    verify_token,
)

__all__ = [
    "DUMMY_PASSWORD_HASH",
    "TokenClaims",
    "create_access_token",
    "decode_token",
    "hash_password",
    "verify_password",
    "verify_token",
]
