"""Unit tests for sessionauth.core.config: defaults and field validation."""

import unittest

from pydantic import ValidationError

from sessionauth.core.config import DEFAULT_SESSION_SECRET
from support import make_settings


class TestDefaults(unittest.TestCase):
    def test_session_max_age_is_24_hours(self) -> None:
        settings = make_settings()
        self.assertEqual(settings.SESSION_MAX_AGE_MS, 86_400_000)
        self.assertEqual(settings.session_max_age_seconds, 86_400)

    def test_admin_registration_disabled_by_default(self) -> None:
        self.assertFalse(make_settings().ALLOW_ADMIN_REGISTRATION)

    def test_cors_origins_empty_by_default(self) -> None:
        self.assertEqual(make_settings().cors_origins, [])


class TestValidation(unittest.TestCase):
    def test_database_url_must_be_sqlite_or_postgres(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(DATABASE_URL="mysql://localhost/db")

    def test_postgres_url_accepted(self) -> None:
        settings = make_settings(DATABASE_URL=" postgresql://u:p@localhost:5432/app ")
        self.assertEqual(settings.DATABASE_URL, "postgresql://u:p@localhost:5432/app")

    def test_empty_session_secret_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(SESSION_SECRET="   ")

    def test_non_hmac_algorithm_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(SESSION_SIGNING_ALGORITHM="RS256")

    def test_algorithm_is_normalised(self) -> None:
        self.assertEqual(make_settings(SESSION_SIGNING_ALGORITHM="hs512").SESSION_SIGNING_ALGORITHM, "HS512")

    def test_session_max_age_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(SESSION_MAX_AGE_MS=999)
        with self.assertRaises(ValidationError):
            make_settings(SESSION_MAX_AGE_MS=366 * 86_400_000)
        self.assertEqual(make_settings(SESSION_MAX_AGE_MS=1000).session_max_age_seconds, 1)

    def test_cookie_name_rejects_separators(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(SESSION_COOKIE_NAME="bad name")
        with self.assertRaises(ValidationError):
            make_settings(SESSION_COOKIE_NAME="a;b")

    def test_log_level_normalised_and_checked(self) -> None:
        self.assertEqual(make_settings(LOG_LEVEL="debug").LOG_LEVEL, "DEBUG")
        with self.assertRaises(ValidationError):
            make_settings(LOG_LEVEL="chatty")

    def test_prod_rejects_default_secret(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(APP_ENV="prod", SESSION_SECRET=DEFAULT_SESSION_SECRET)

    def test_prod_rejects_short_secret(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(APP_ENV="prod", SESSION_SECRET="x" * 31)

    def test_prod_accepts_long_secret(self) -> None:
        settings = make_settings(APP_ENV="prod", SESSION_SECRET="x" * 32)
        self.assertEqual(settings.APP_ENV, "prod")

    def test_dev_allows_default_secret(self) -> None:
        settings = make_settings(SESSION_SECRET=DEFAULT_SESSION_SECRET)
        self.assertEqual(settings.SESSION_SECRET.get_secret_value(), DEFAULT_SESSION_SECRET)

    def test_cors_origins_split_on_commas(self) -> None:
        settings = make_settings(CORS_ALLOW_ORIGINS="http://a.test, http://b.test,")
        self.assertEqual(settings.cors_origins, ["http://a.test", "http://b.test"])


if __name__ == "__main__":
    unittest.main()
