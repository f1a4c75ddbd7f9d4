"""Unit tests for sessionauth.core.security: password hashing and signed session ids."""

import unittest

import jwt
from pydantic import SecretStr

from sessionauth.core.security import (
    generate_session_id,
    hash_password,
    sign_session_id,
    unsign_session_id,
    verify_password,
    verify_password_or_dummy,
)
from support import TEST_SECRET, fast_bcrypt, make_settings


class TestPasswordHashing(unittest.TestCase):
    def setUp(self) -> None:
        bcrypt_patch = fast_bcrypt()
        bcrypt_patch.start()
        self.addCleanup(bcrypt_patch.stop)

    def test_hash_is_salted_and_not_plaintext(self) -> None:
        first = hash_password("correct-horse")
        second = hash_password("correct-horse")
        self.assertNotEqual(first, "correct-horse")
        self.assertNotEqual(first, second)

    def test_verify_accepts_right_password(self) -> None:
        self.assertTrue(verify_password("correct-horse", hash_password("correct-horse")))

    def test_verify_rejects_wrong_password(self) -> None:
        self.assertFalse(verify_password("wrong-horse", hash_password("correct-horse")))

    def test_verify_rejects_malformed_hash(self) -> None:
        self.assertFalse(verify_password("correct-horse", "not-a-bcrypt-hash"))

    def test_hash_refuses_password_over_bcrypt_limit(self) -> None:
        with self.assertRaises(ValueError):
            hash_password("a" * 73)
        # Multi-byte characters count by their UTF-8 size.
        with self.assertRaises(ValueError):
            hash_password("\u00e9" * 37)

    def test_password_at_bcrypt_limit_round_trips(self) -> None:
        password = "a" * 72
        self.assertTrue(verify_password(password, hash_password(password)))

    def test_extra_bytes_past_limit_never_match(self) -> None:
        hashed = hash_password("a" * 72)
        self.assertFalse(verify_password("a" * 72 + "different", hashed))

    def test_dummy_verification_without_hash_is_false(self) -> None:
        self.assertFalse(verify_password_or_dummy("anything", None))

    def test_dummy_verification_with_hash_delegates(self) -> None:
        hashed = hash_password("correct-horse")
        self.assertTrue(verify_password_or_dummy("correct-horse", hashed))
        self.assertFalse(verify_password_or_dummy("wrong-horse", hashed))


class TestSessionIds(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = make_settings()

    def test_generated_ids_are_unique_and_long(self) -> None:
        ids = {generate_session_id() for _ in range(100)}
        self.assertEqual(len(ids), 100)
        self.assertTrue(all(len(i) >= 43 for i in ids))

    def test_signed_id_reads_back(self) -> None:
        token = sign_session_id("sid-123", self.settings)
        self.assertEqual(unsign_session_id(token, self.settings), "sid-123")

    def test_other_secret_is_rejected(self) -> None:
        token = sign_session_id("sid-123", self.settings)
        other = self.settings.model_copy(update={"SESSION_SECRET": SecretStr("other-session-secret-0123456789abcdef")})
        self.assertIsNone(unsign_session_id(token, other))

    def test_tampered_token_is_rejected(self) -> None:
        token = sign_session_id("sid-123", self.settings)
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, ("A" if signature[0] != "A" else "B") + signature[1:]])
        self.assertIsNone(unsign_session_id(tampered, self.settings))

    def test_garbage_is_rejected(self) -> None:
        self.assertIsNone(unsign_session_id("garbage", self.settings))

    def test_token_without_sid_is_rejected(self) -> None:
        token = jwt.encode({"user": 1}, TEST_SECRET, algorithm="HS256")
        self.assertIsNone(unsign_session_id(token, self.settings))


if __name__ == "__main__":
    unittest.main()
