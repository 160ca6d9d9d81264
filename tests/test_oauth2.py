"""Tests for Google OAuth2: provider client (httpx mock transport) and the local-user bridge."""

import json
import unittest
from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlparse

import httpx
from pydantic import SecretStr

from app.core.exceptions import (
    AuthenticationFailedError,
    OAuth2NotConfiguredError,
    OAuth2ProviderError,
)
from app.core.security import decode_access_token
from app.models import RoleName, User
from app.repositories.refresh_tokens import RefreshTokenStore
from app.repositories.users import RoleRepository, UserRepository
from app.services.oauth2 import FederatedIdentity, GoogleOAuth2Client, OAuth2Bridge
from app.services.sessions import SessionService
from tests.support import add_roles, add_user, fast_bcrypt, make_session_factory


def _settings(client_id: str | None = "client-id", secret: str | None = "client-secret") -> MagicMock:
    settings = MagicMock()
    settings.GOOGLE_CLIENT_ID = client_id
    settings.GOOGLE_CLIENT_SECRET = SecretStr(secret) if secret is not None else None
    settings.GOOGLE_REDIRECT_URI = "http://localhost:8000/api/v1/oauth2/callback/google"
    settings.GOOGLE_AUTH_URL = "https://accounts.example.com/auth"
    settings.GOOGLE_TOKEN_URL = "https://oauth2.example.com/token"
    settings.GOOGLE_USERINFO_URL = "https://openid.example.com/userinfo"
    settings.GOOGLE_REQUEST_TIMEOUT_SEC = 5.0
    return settings


def _google(token_status: int = 200, userinfo: dict | None = None) -> httpx.Client:
    """httpx client whose transport imitates Google's token and user-info endpoints."""
    info = userinfo if userinfo is not None else {
        "sub": "1234567890",
        "email": "Jane.Doe@Gmail.com",
        "email_verified": True,
        "given_name": "Jane",
        "family_name": "Doe",
    }

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/token":
            form = parse_qs(request.content.decode())
            if token_status != 200:
                return httpx.Response(token_status, json={"error": "invalid_grant"})
            assert form["code"] == ["auth-code"]
            assert form["client_secret"] == ["client-secret"]
            return httpx.Response(200, json={"access_token": "google-access", "token_type": "Bearer"})
        if request.url.path == "/userinfo":
            assert request.headers["Authorization"] == "Bearer google-access"
            return httpx.Response(200, content=json.dumps(info))
        return httpx.Response(404)

    return httpx.Client(transport=httpx.MockTransport(handler))


class TestGoogleOAuth2Client(unittest.TestCase):
    def test_authorization_url(self) -> None:
        url = GoogleOAuth2Client(_settings()).authorization_url("state-123")
        parsed = urlparse(url)
        query = parse_qs(parsed.query)
        self.assertEqual(f"{parsed.scheme}://{parsed.netloc}{parsed.path}", "https://accounts.example.com/auth")
        self.assertEqual(query["client_id"], ["client-id"])
        self.assertEqual(query["state"], ["state-123"])
        self.assertEqual(query["response_type"], ["code"])
        self.assertIn("email", query["scope"][0])

    def test_not_configured(self) -> None:
        for settings in (_settings(client_id=None), _settings(client_id="  "), _settings(secret=None)):
            client = GoogleOAuth2Client(settings)
            self.assertFalse(client.is_configured())
            with self.assertRaises(OAuth2NotConfiguredError):
                client.authorization_url("s")
            with self.assertRaises(OAuth2NotConfiguredError):
                client.fetch_identity("code")

    def test_fetch_identity(self) -> None:
        client = GoogleOAuth2Client(_settings(), http_client=_google())
        identity = client.fetch_identity("auth-code")
        self.assertEqual(identity.email, "jane.doe@gmail.com")
        self.assertEqual(identity.given_name, "Jane")
        self.assertEqual(identity.family_name, "Doe")
        self.assertEqual(identity.subject, "1234567890")
        self.assertTrue(identity.email_verified)

    def test_rejected_code(self) -> None:
        client = GoogleOAuth2Client(_settings(), http_client=_google(token_status=400))
        with self.assertRaises(OAuth2ProviderError) as ctx:
            client.fetch_identity("auth-code")
        self.assertIn("invalid_grant", ctx.exception.message)

    def test_userinfo_without_email(self) -> None:
        client = GoogleOAuth2Client(_settings(), http_client=_google(userinfo={"sub": "1"}))
        with self.assertRaises(OAuth2ProviderError):
            client.fetch_identity("auth-code")


class TestOAuth2Bridge(unittest.TestCase):
    def setUp(self) -> None:
        patcher = fast_bcrypt()
        patcher.start()
        self.addCleanup(patcher.stop)
        self.db = make_session_factory()()
        self.addCleanup(self.db.close)
        self.roles = add_roles(self.db)
        self.users = UserRepository(self.db)
        roles = RoleRepository(self.db)
        sessions = SessionService(self.users, roles, RefreshTokenStore(self.db))
        self.bridge = OAuth2Bridge(self.users, roles, sessions)

    def test_first_login_creates_google_user(self) -> None:
        user = self.bridge.process_oauth_post_login("new@gmail.com", "New", "Person", "sub-1")
        self.assertIsNotNone(user.id)
        self.assertEqual(user.auth_provider, "GOOGLE")
        self.assertIsNone(user.password_hash)
        self.assertEqual(user.google_id, "sub-1")
        self.assertEqual([r.role_name for r in user.roles], ["USER"])

    def test_existing_user_is_reused_unchanged(self) -> None:
        existing = add_user(self.db, "local@gmail.com", roles=[self.roles[RoleName.ADMIN]])
        user = self.bridge.process_oauth_post_login("LOCAL@gmail.com", "Other", "Name")
        self.assertEqual(user.id, existing.id)
        self.assertEqual(user.first_name, "Test")
        self.assertEqual(user.auth_provider, "LOCAL")
        self.assertEqual(self.db.query(User).count(), 1)

    def test_soft_deleted_user_is_refused(self) -> None:
        add_user(self.db, "gone@gmail.com", deleted=True)
        with self.assertRaises(AuthenticationFailedError):
            self.bridge.process_oauth_post_login("gone@gmail.com", "G", "One")

    def test_racing_first_login_reuses_the_winner(self) -> None:
        # The other request inserts between this one's lookup and its insert.
        winner = add_user(self.db, "race@gmail.com", password=None, roles=[self.roles[RoleName.USER]])
        lookups = [None]
        real_find = self.users.find_by_email

        def find_by_email(email: str):
            return lookups.pop() if lookups else real_find(email)

        with patch.object(self.users, "find_by_email", side_effect=find_by_email):
            user = self.bridge.process_oauth_post_login("race@gmail.com", "Race", "Two", "sub-2")
        self.assertEqual(user.id, winner.id)
        self.assertEqual(self.db.query(User).count(), 1)

    def test_racing_first_login_of_deleted_user_is_refused(self) -> None:
        add_user(self.db, "racegone@gmail.com", deleted=True)
        lookups = [None]
        real_find = self.users.find_by_email

        def find_by_email(email: str):
            return lookups.pop() if lookups else real_find(email)

        with patch.object(self.users, "find_by_email", side_effect=find_by_email):
            with self.assertRaises(AuthenticationFailedError):
                self.bridge.process_oauth_post_login("racegone@gmail.com", "G", "One")

    def test_login_issues_local_tokens(self) -> None:
        result = self.bridge.login(FederatedIdentity(email="jane@gmail.com", given_name="Jane"))
        self.assertEqual(decode_access_token(result.access_token)["email"], "jane@gmail.com")
        self.assertEqual(result.roles, ["USER"])
        self.assertTrue(result.refresh_token)

    def test_unverified_email_is_refused(self) -> None:
        with self.assertRaises(AuthenticationFailedError):
            self.bridge.login(FederatedIdentity(email="x@gmail.com", email_verified=False))
        self.assertEqual(self.db.query(User).count(), 0)


if __name__ == "__main__":
    unittest.main()
