"""Session Facade: register, login, refresh-token rotation and logout."""

import logging
from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError

from app.core.exceptions import (
    EmailAlreadyExistsError,
    InvalidTokenError,
    ResourceNotFoundError,
    TokenNotFoundError,
)
from app.core.security import BcryptPasswordHasher, roles_to_authority_strings
from app.models.user import AuthProvider, RoleName, User
from app.repositories.refresh_tokens import RefreshTokenStore
from app.repositories.users import RoleRepository, UserRepository, normalize_email
from app.services.credentials import CredentialVerifier
from app.services.tokens import TokenIssuer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    """Tokens issued for a user. refresh_token goes to the cookie, the rest to the body."""

    user: User
    access_token: str
    access_token_expires_in: int
    refresh_token: str
    roles: list[str] = field(default_factory=list)


class SessionService:
    """
    Stateless session lifecycle: Anonymous -> Authenticated -> (Refreshed)* -> LoggedOut.

    Access tokens are self-contained JWTs; the only server-side session state is
    the single refresh-token row per user.
    """

    def __init__(
        self,
        users: UserRepository,
        roles: RoleRepository,
        refresh_tokens: RefreshTokenStore,
        hasher: BcryptPasswordHasher | None = None,
    ):
        self.users = users
        self.roles = roles
        self.refresh_tokens = refresh_tokens
        self.hasher = hasher or BcryptPasswordHasher()
        self.verifier = CredentialVerifier(users, self.hasher)
        self.issuer = TokenIssuer(refresh_tokens)

    def register(self, first_name: str, last_name: str, email: str, password: str) -> AuthResult:
        """Create a LOCAL user with role USER and sign them in."""
        email = normalize_email(email)
        if self.users.email_exists(email):
            logger.info("Registration rejected: email already taken (%s)", email)
            raise EmailAlreadyExistsError(f"Email {email} is already taken.")
        role = self.roles.find_by_role_name(RoleName.USER)
        if role is None:
            logger.error("Registration failed: default role USER is missing; run the seeder")
            raise ResourceNotFoundError("Default role USER not found.")
        user = User(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email,
            password_hash=self.hasher.encode(password),
            auth_provider=AuthProvider.LOCAL.value,
            deleted=False,
            roles=[role],
        )
        try:
            user = self.users.save(user)
        except IntegrityError as e:
            raise EmailAlreadyExistsError(f"Email {email} is already taken.") from e
        logger.info("Registered user_id=%s email=%s", user.id, user.email)
        return self.issue_tokens(user)

    def login(self, email: str, password: str) -> AuthResult:
        user = self.verifier.verify(email, password)
        result = self.issue_tokens(user)
        logger.info("User %s signed in", user.email)
        return result

    def issue_tokens(self, user: User) -> AuthResult:
        """Issue an access token and a fresh refresh token (replacing any prior one)."""
        access = self.issuer.issue_access_token(user)
        refresh = self.issuer.issue_refresh_token(user)
        return AuthResult(
            user=user,
            access_token=access.token,
            access_token_expires_in=access.expires_in,
            refresh_token=refresh.token,
            roles=roles_to_authority_strings(user.roles),
        )

    def refresh(self, refresh_token_value: str | None) -> AuthResult:
        """
        Rotate the refresh token and issue a new access token.

        The presented token stops working immediately. Raises InvalidTokenError
        (or a subclass) when the token is missing, unknown, expired, or owned by
        a soft-deleted user.
        """
        if not refresh_token_value:
            raise TokenNotFoundError("Refresh token is missing.")
        user, new_value = self.issuer.rotate_refresh_token(refresh_token_value)
        if user.deleted:
            self.refresh_tokens.revoke(user)
            logger.info("Refresh rejected for soft-deleted user_id=%s", user.id)
            raise InvalidTokenError("Account is disabled. Please sign in again.")
        access = self.issuer.issue_access_token(user)
        logger.debug("Issued refreshed access token for user_id=%s", user.id)
        return AuthResult(
            user=user,
            access_token=access.token,
            access_token_expires_in=access.expires_in,
            refresh_token=new_value,
            roles=roles_to_authority_strings(user.roles),
        )

    def logout(self, user: User) -> bool:
        """Revoke the user's refresh token. Idempotent."""
        revoked = self.refresh_tokens.revoke(user)
        logger.info("User_id=%s logged out (token revoked=%s)", user.id, revoked)
        return revoked

    def logout_by_refresh_token(self, refresh_token_value: str) -> bool:
        """Revoke the owner of a presented refresh token, if it is known."""
        row = self.refresh_tokens.find_by_token(refresh_token_value)
        if row is None:
            return False
        return self.logout(row.user)
