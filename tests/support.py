"""Shared builders for tests: throwaway SQLite databases, explicit app context, frozen clock."""

import tempfile
import unittest
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient

from sessionauth.core.clock import FrozenClock
from sessionauth.core.config import Settings
from sessionauth.core.context import AppContext, build_context
from sessionauth.core.database import init_db
from sessionauth.core.security import unsign_session_id
from sessionauth.main import create_app
from sessionauth.services.users import create_user

START = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
COOKIE_NAME = "sessionauth.sid"
TEST_SECRET = "test-session-secret-0123456789abcdef"


def make_settings(**overrides: object) -> Settings:
    """Test settings; ignores any local .env."""
    values: dict[str, object] = {
        "DATABASE_URL": "sqlite://",
        "DATABASE_AUTO_CREATE": False,
        "SESSION_SECRET": TEST_SECRET,
        "SESSION_COOKIE_NAME": COOKIE_NAME,
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_context(test: unittest.TestCase, clock: FrozenClock | None = None, **overrides: object) -> AppContext:
    """
    Context over a fresh SQLite file, closed and removed when the test ends.

    A file rather than :memory: so the session store and the request's DB
    session use separate connections.
    """
    tmp = tempfile.TemporaryDirectory()
    test.addCleanup(tmp.cleanup)
    overrides.setdefault("DATABASE_URL", f"sqlite:///{Path(tmp.name) / 'sessionauth.db'}")
    context = build_context(make_settings(**overrides), clock=clock or FrozenClock(START))
    test.addCleanup(context.close)
    init_db(context.engine)
    return context


def make_client(context: AppContext) -> TestClient:
    return TestClient(create_app(context=context))


def add_user(context: AppContext, username: str, password: str, role: str = "user") -> int:
    """Insert a user straight into the store (how admins are created) and return its id."""
    with context.session_factory() as db:
        return create_user(db, username, password, role).id


def login(client: TestClient, username: str, password: str):
    return client.post("/login", json={"username": username, "password": password})


def session_payload(client: TestClient, context: AppContext) -> dict | None:
    """Payload stored for the client's current session cookie, or None."""
    cookie = client.cookies.get(COOKIE_NAME)
    if cookie is None:
        return None
    session_id = unsign_session_id(cookie, context.settings)
    if session_id is None:
        return None
    return context.session_store.load(session_id)


def fast_bcrypt():
    """Patch bcrypt cost down so tests that hash passwords stay quick."""
    return patch("sessionauth.core.security.BCRYPT_ROUNDS", 4)
