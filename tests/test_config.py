"""Tests for Settings validators: derived refresh-cookie path and prefix checks."""

import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from app.core.config import Settings


def _settings(**overrides) -> Settings:
    # Ignore the developer's .env and shell so only the overrides apply.
    with patch.dict(os.environ, {}, clear=True):
        return Settings(_env_file=None, **overrides)


class TestRefreshCookiePath(unittest.TestCase):
    def test_defaults_to_auth_under_api_prefix(self) -> None:
        self.assertEqual(_settings().REFRESH_COOKIE_PATH, "/api/v1/auth")

    def test_follows_a_changed_api_prefix(self) -> None:
        settings = _settings(API_V1_PREFIX="/api/v2/")
        self.assertEqual(settings.API_V1_PREFIX, "/api/v2")
        self.assertEqual(settings.REFRESH_COOKIE_PATH, "/api/v2/auth")

    def test_explicit_path_wins(self) -> None:
        settings = _settings(API_V1_PREFIX="/api/v2", REFRESH_COOKIE_PATH=" /custom ")
        self.assertEqual(settings.REFRESH_COOKIE_PATH, "/custom")

    def test_read_from_environment(self) -> None:
        with patch.dict(os.environ, {"API_V1_PREFIX": "/rentals/api"}, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.REFRESH_COOKIE_PATH, "/rentals/api/auth")


class TestApiPrefix(unittest.TestCase):
    def test_prefix_must_be_absolute(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(API_V1_PREFIX="api/v1")


if __name__ == "__main__":
    unittest.main()
