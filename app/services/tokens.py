"""Token Issuer: JWT access tokens and rotating opaque refresh tokens."""

from dataclasses import dataclass

from app.core.security import (
    create_access_token,
    generate_refresh_token_value,
    refresh_token_expiry,
)
from app.models.refresh_token import RefreshToken
from app.models.user import User
from app.repositories.refresh_tokens import RefreshTokenStore


@dataclass(frozen=True)
class IssuedAccessToken:
    token: str
    expires_in: int


class TokenIssuer:
    def __init__(self, store: RefreshTokenStore):
        self.store = store

    def issue_access_token(self, user: User) -> IssuedAccessToken:
        token, expires_in = create_access_token(user)
        return IssuedAccessToken(token=token, expires_in=expires_in)

    def issue_refresh_token(self, user: User) -> RefreshToken:
        """Persist a fresh token for the user, replacing any previous one."""
        return self.store.save(user, generate_refresh_token_value(), refresh_token_expiry())

    def rotate_refresh_token(self, current_value: str) -> tuple[User, str]:
        """Swap current_value for a new token. Returns (owner, new token value)."""
        new_value = generate_refresh_token_value()
        user = self.store.rotate(current_value, new_value, refresh_token_expiry())
        return user, new_value
