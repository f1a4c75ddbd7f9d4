"""Tests for the create_user CLI (the supported way to add admin accounts)."""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from sessionauth.core.database import build_engine, build_session_factory
from sessionauth.models import User
from sessionauth.scripts.create_user import main
from support import fast_bcrypt, make_settings


class TestCreateUserCli(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.settings = make_settings(
            DATABASE_URL=f"sqlite:///{Path(tmp.name) / 'users.db'}",
            DATABASE_AUTO_CREATE=True,
        )
        for p in (fast_bcrypt(), patch("sessionauth.scripts.create_user.get_settings", return_value=self.settings)):
            p.start()
            self.addCleanup(p.stop)

    def stored_roles(self) -> dict[str, str]:
        engine = build_engine(self.settings)
        try:
            with build_session_factory(engine)() as db:
                return {u.username: u.role for u in db.query(User).all()}
        finally:
            engine.dispose()

    def test_creates_admin(self) -> None:
        self.assertEqual(main(["root", "root-password", "admin"]), 0)
        self.assertEqual(self.stored_roles(), {"root": "admin"})

    def test_role_defaults_to_user(self) -> None:
        self.assertEqual(main(["alice", "correct-horse"]), 0)
        self.assertEqual(self.stored_roles(), {"alice": "user"})

    def test_duplicate_username_fails(self) -> None:
        self.assertEqual(main(["alice", "correct-horse"]), 0)
        self.assertEqual(main(["alice", "other-password", "admin"]), 1)
        self.assertEqual(self.stored_roles(), {"alice": "user"})

    def test_short_password_fails(self) -> None:
        self.assertEqual(main(["alice", "short"]), 1)

    def test_blank_username_fails(self) -> None:
        self.assertEqual(main(["   ", "correct-horse"]), 1)

    def test_password_over_bcrypt_limit_fails(self) -> None:
        self.assertEqual(main(["alice", "a" * 73]), 1)


if __name__ == "__main__":
    unittest.main()
