"""Password hashing, JWT access tokens and refresh-token values for authentication."""

from __future__ import annotations

import secrets
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from app.core.config import settings

if TYPE_CHECKING:
    from app.models.user import Role, User

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Min/max lengths for email and password validation.
EMAIL_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# Entropy of opaque refresh-token values, in bytes before base64url encoding.
REFRESH_TOKEN_BYTES = 48

ACCESS_TOKEN_TYPE = "access"


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class BcryptPasswordHasher:
    """Password hashing service handed to the seeder and the session facade."""

    def encode(self, plain_password: str) -> str:
        return hash_password(plain_password)

    def matches(self, plain_password: str, hashed: str | None) -> bool:
        if not hashed:
            return False
        return verify_password(plain_password, hashed)


def roles_to_authority_strings(roles: Iterable[Role] | None) -> list[str]:
    """Map roles to the authority names used in token claims, responses and role checks."""
    if not roles:
        return []
    return [role.role_name for role in roles if role is not None and role.role_name]


def create_access_token(user: User) -> tuple[str, int]:
    """
    Create a signed JWT for the user.

    Claims: sub (user UUID), email, roles, type, iat, exp.
    Returns (token, expires_in_seconds).
    """
    now = datetime.now(UTC)
    expires_in = settings.JWT_EXPIRE_MINUTES * 60
    payload: dict[str, Any] = {
        "sub": str(user.uuid),
        "email": user.email,
        "roles": roles_to_authority_strings(user.roles),
        "type": ACCESS_TOKEN_TYPE,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
    }
    token = jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )
    return token, expires_in


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, email, roles, type, iat, exp).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    payload = jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp", "iat"]},
    )
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise jwt.InvalidTokenError("Not an access token")
    return payload


def generate_refresh_token_value() -> str:
    """Cryptographically random, URL-safe opaque refresh token."""
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


def refresh_token_expiry(now: datetime | None = None) -> datetime:
    """Expiry instant for a refresh token issued at `now` (defaults to the current time)."""
    issued_at = now or datetime.now(UTC)
    return issued_at + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
