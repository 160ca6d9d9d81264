"""Credential Verifier: email/password check against stored bcrypt hashes."""

import logging

from app.core.exceptions import AuthenticationFailedError
from app.core.security import BcryptPasswordHasher
from app.models.user import User
from app.repositories.users import UserRepository

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."


class CredentialVerifier:
    def __init__(self, users: UserRepository, hasher: BcryptPasswordHasher | None = None):
        self.users = users
        self.hasher = hasher or BcryptPasswordHasher()

    def verify(self, email: str, password: str) -> User:
        """
        Return the active user owning the credentials.

        Raises AuthenticationFailedError for unknown or soft-deleted accounts,
        accounts without a local password, and wrong passwords. The message is
        the same in every case.
        """
        user = self.users.find_active_by_email(email)
        if user is None:
            logger.info("Login failed: no active user for email=%s", email)
            raise AuthenticationFailedError(INVALID_CREDENTIALS_MESSAGE)
        if not self.hasher.matches(password, user.password_hash):
            logger.info("Login failed: bad password for user_id=%s", user.id)
            raise AuthenticationFailedError(INVALID_CREDENTIALS_MESSAGE)
        return user
