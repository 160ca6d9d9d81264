"""Google OAuth2 sign-in: provider client and the bridge to local users and tokens."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

import httpx
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import (
    AuthenticationFailedError,
    OAuth2NotConfiguredError,
    OAuth2ProviderError,
    ResourceNotFoundError,
)
from app.models.user import AuthProvider, RoleName, User
from app.repositories.users import RoleRepository, UserRepository, normalize_email
from app.services.sessions import AuthResult, SessionService

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

GOOGLE_SCOPES = "openid email profile"


@dataclass(frozen=True)
class FederatedIdentity:
    """User-info attributes returned by the provider after authentication."""

    email: str
    given_name: str | None = None
    family_name: str | None = None
    subject: str | None = None
    email_verified: bool = True


def _is_google_configured(settings: Settings) -> bool:
    if not settings.GOOGLE_CLIENT_ID or not settings.GOOGLE_CLIENT_ID.strip():
        return False
    if settings.GOOGLE_CLIENT_SECRET is None:
        return False
    return bool(settings.GOOGLE_CLIENT_SECRET.get_secret_value().strip())


def _error_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:300] if resp.text else "Unknown error"
    if isinstance(body, dict):
        return str(body.get("error_description") or body.get("error") or body)[:300]
    return str(body)[:300]


class GoogleOAuth2Client:
    """Authorization-code flow against Google's OAuth2 and OpenID user-info endpoints."""

    def __init__(self, settings: Settings, http_client: httpx.Client | None = None):
        self.settings = settings
        self._http_client = http_client

    def is_configured(self) -> bool:
        return _is_google_configured(self.settings)

    def authorization_url(self, state: str) -> str:
        if not self.is_configured():
            raise OAuth2NotConfiguredError("Google sign-in is not configured.")
        params = {
            "response_type": "code",
            "client_id": self.settings.GOOGLE_CLIENT_ID,
            "redirect_uri": self.settings.GOOGLE_REDIRECT_URI,
            "scope": GOOGLE_SCOPES,
            "state": state,
            "access_type": "online",
            "prompt": "select_account",
        }
        return f"{self.settings.GOOGLE_AUTH_URL}?{urlencode(params)}"

    def fetch_identity(self, code: str) -> FederatedIdentity:
        """Exchange the authorization code and read the user-info document."""
        if not self.is_configured():
            raise OAuth2NotConfiguredError("Google sign-in is not configured.")
        if self._http_client is not None:
            return self._fetch_identity(self._http_client, code)
        with httpx.Client(timeout=self.settings.GOOGLE_REQUEST_TIMEOUT_SEC) as client:
            return self._fetch_identity(client, code)

    def _fetch_identity(self, client: httpx.Client, code: str) -> FederatedIdentity:
        access_token = self._exchange_code(client, code)
        info = self._get_userinfo(client, access_token)
        email = info.get("email")
        if not email:
            raise OAuth2ProviderError("Google did not return an email address.")
        return FederatedIdentity(
            email=normalize_email(email),
            given_name=info.get("given_name"),
            family_name=info.get("family_name"),
            subject=info.get("sub"),
            email_verified=bool(info.get("email_verified", True)),
        )

    def _exchange_code(self, client: httpx.Client, code: str) -> str:
        secret = self.settings.GOOGLE_CLIENT_SECRET
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "client_id": self.settings.GOOGLE_CLIENT_ID,
            "client_secret": secret.get_secret_value() if secret else "",
            "redirect_uri": self.settings.GOOGLE_REDIRECT_URI,
        }
        try:
            resp = client.post(self.settings.GOOGLE_TOKEN_URL, data=data)
        except httpx.HTTPError as e:
            logger.warning("Google token endpoint unreachable: %s", e)
            raise OAuth2ProviderError("Google token endpoint is unreachable.") from e
        if resp.status_code >= 400:
            raise OAuth2ProviderError(
                f"Google rejected the authorization code ({resp.status_code}): {_error_detail(resp)}"
            )
        token = resp.json().get("access_token")
        if not token:
            raise OAuth2ProviderError("Google token response is missing access_token.")
        return token

    def _get_userinfo(self, client: httpx.Client, access_token: str) -> dict[str, Any]:
        try:
            resp = client.get(
                self.settings.GOOGLE_USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            logger.warning("Google user-info endpoint unreachable: %s", e)
            raise OAuth2ProviderError("Google user-info endpoint is unreachable.") from e
        if resp.status_code >= 400:
            raise OAuth2ProviderError(
                f"Google user-info request failed ({resp.status_code}): {_error_detail(resp)}"
            )
        return resp.json()


class OAuth2Bridge:
    """Maps a federated identity to a local user and issues local tokens."""

    def __init__(self, users: UserRepository, roles: RoleRepository, sessions: SessionService):
        self.users = users
        self.roles = roles
        self.sessions = sessions

    def process_oauth_post_login(
        self,
        email: str,
        first_name: str | None,
        last_name: str | None,
        provider_id: str | None = None,
    ) -> User:
        """
        Return the local user for a federated email, creating it on first login.

        New users get provider GOOGLE, role USER and no password. Existing users
        are reused as they are, names included.
        """
        existing = self.users.find_by_email(email)
        if existing is not None:
            if existing.deleted:
                logger.info("OAuth2 sign-in refused for soft-deleted user_id=%s", existing.id)
                raise AuthenticationFailedError("This account has been disabled.")
            logger.info("OAuth2 sign-in for existing user_id=%s", existing.id)
            return existing

        role = self.roles.find_by_role_name(RoleName.USER)
        if role is None:
            logger.error("OAuth2 sign-in failed: default role USER is missing; run the seeder")
            raise ResourceNotFoundError("Default role USER not found.")
        user = User(
            first_name=first_name,
            last_name=last_name,
            email=normalize_email(email),
            password_hash=None,
            auth_provider=AuthProvider.GOOGLE.value,
            google_id=provider_id,
            deleted=False,
            roles=[role],
        )
        try:
            user = self.users.save(user)
        except IntegrityError:
            # A concurrent first sign-in for the same email inserted it first.
            raced = self.users.find_by_email(email)
            if raced is None:
                raise
            if raced.deleted:
                raise AuthenticationFailedError("This account has been disabled.")
            logger.info("OAuth2 sign-in raced for %s; reusing user_id=%s", raced.email, raced.id)
            return raced
        logger.info("Created user_id=%s from Google sign-in (%s)", user.id, user.email)
        return user

    def login(self, identity: FederatedIdentity) -> AuthResult:
        if not identity.email_verified:
            raise AuthenticationFailedError("Google email address is not verified.")
        user = self.process_oauth_post_login(
            identity.email,
            identity.given_name,
            identity.family_name,
            identity.subject,
        )
        return self.sessions.issue_tokens(user)
