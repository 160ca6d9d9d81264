"""Unit tests for app.core.security: bcrypt hashing, JWT access tokens, refresh-token values."""

import unittest
import uuid
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import jwt

from app.core.config import settings
from app.core.security import (
    BcryptPasswordHasher,
    create_access_token,
    decode_access_token,
    generate_refresh_token_value,
    refresh_token_expiry,
    roles_to_authority_strings,
)
from tests.support import fast_bcrypt


def _user(roles: list[str]) -> SimpleNamespace:
    return SimpleNamespace(
        uuid=uuid.uuid4(),
        email="user@gmail.com",
        roles=[SimpleNamespace(role_name=r) for r in roles],
    )


class TestPasswordHasher(unittest.TestCase):
    def setUp(self) -> None:
        patcher = fast_bcrypt()
        patcher.start()
        self.addCleanup(patcher.stop)
        self.hasher = BcryptPasswordHasher()

    def test_matches_own_hash(self) -> None:
        hashed = self.hasher.encode("userpassword")
        self.assertNotEqual(hashed, "userpassword")
        self.assertTrue(self.hasher.matches("userpassword", hashed))
        self.assertFalse(self.hasher.matches("wrong", hashed))

    def test_missing_hash_never_matches(self) -> None:
        self.assertFalse(self.hasher.matches("anything", None))
        self.assertFalse(self.hasher.matches("anything", ""))

    def test_malformed_hash_does_not_raise(self) -> None:
        self.assertFalse(self.hasher.matches("anything", "not-a-bcrypt-hash"))


class TestRolesToAuthorityStrings(unittest.TestCase):
    def test_keeps_order(self) -> None:
        user = _user(["USER", "ADMIN"])
        self.assertEqual(roles_to_authority_strings(user.roles), ["USER", "ADMIN"])

    def test_empty_and_none(self) -> None:
        self.assertEqual(roles_to_authority_strings(None), [])
        self.assertEqual(roles_to_authority_strings([]), [])


class TestAccessToken(unittest.TestCase):
    def test_claims(self) -> None:
        user = _user(["USER"])
        token, expires_in = create_access_token(user)
        self.assertEqual(expires_in, settings.JWT_EXPIRE_MINUTES * 60)
        payload = decode_access_token(token)
        self.assertEqual(payload["sub"], str(user.uuid))
        self.assertEqual(payload["email"], "user@gmail.com")
        self.assertEqual(payload["roles"], ["USER"])
        self.assertEqual(payload["exp"] - payload["iat"], expires_in)

    def test_expired_token_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "sub": str(uuid.uuid4()),
                "type": "access",
                "iat": now - timedelta(hours=2),
                "exp": now - timedelta(hours=1),
            },
            settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_access_token(token)

    def test_wrong_signature_rejected(self) -> None:
        token, _ = create_access_token(_user(["USER"]))
        forged = jwt.encode(
            jwt.decode(token, options={"verify_signature": False}),
            "some-other-secret",
            algorithm="HS256",
        )
        with self.assertRaises(jwt.InvalidSignatureError):
            decode_access_token(forged)

    def test_non_access_token_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "x", "type": "refresh", "iat": now, "exp": now + timedelta(minutes=5)},
            settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
        with self.assertRaises(jwt.InvalidTokenError):
            decode_access_token(token)


class TestRefreshTokenValues(unittest.TestCase):
    def test_values_are_unique_and_url_safe(self) -> None:
        values = {generate_refresh_token_value() for _ in range(50)}
        self.assertEqual(len(values), 50)
        for v in values:
            self.assertRegex(v, r"^[A-Za-z0-9_-]+$")
            self.assertLessEqual(len(v), 128)

    def test_expiry_uses_configured_days(self) -> None:
        now = datetime(2026, 1, 1, tzinfo=UTC)
        self.assertEqual(
            refresh_token_expiry(now),
            now + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        )


if __name__ == "__main__":
    unittest.main()
