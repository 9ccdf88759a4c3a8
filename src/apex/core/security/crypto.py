"""Password hashing, access tokens and reset-token digests."""

import secrets
from datetime import UTC, datetime, timedelta
from functools import cache
from hashlib import sha256
from typing import Any, TypedDict
from uuid import UUID

import argon2
from argon2.exceptions import InvalidHashError, VerificationError
from jose import JWTError, jwt

from src.apex.core.config import get_settings

ACCESS_TOKEN_TYPE = "access"


class AccessClaims(TypedDict):
    sub: str
    email: str
    role: str
    type: str
    iat: datetime
    exp: datetime


@cache
def _hasher() -> argon2.PasswordHasher:
    settings = get_settings()
    return argon2.PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )


def hash_password(password: str) -> str:
    return _hasher().hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Argon2id check; malformed hashes count as a mismatch."""
    try:
        return _hasher().verify(hashed, password)
    except (VerificationError, InvalidHashError):
        return False


# Checked against when the email is unknown so login timing does not reveal accounts
DUMMY_PASSWORD_HASH = hash_password("apex-timing-equalizer")


def generate_reset_token() -> str:
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    """Digest stored in place of a reset token; the plaintext is never persisted."""
    return sha256(token.encode()).hexdigest()


def create_access_token(
    subject: str | UUID,
    email: str,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    settings = get_settings()
    issued_at = datetime.now(UTC)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims: AccessClaims = {
        "sub": str(subject),
        "email": email,
        "role": role,
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(  # type: ignore[no-any-return]
        dict(claims), settings.jwt_secret_key, algorithm=settings.jwt_algorithm
    )


def decode_token(token: str) -> dict[str, Any] | None:
    """Verified claims of a token, or None if it is forged, malformed or expired."""
    settings = get_settings()
    try:
        return jwt.decode(  # type: ignore[no-any-return]
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        return None
