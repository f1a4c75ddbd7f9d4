"""Password hashing and signed session cookies."""

import secrets
from typing import Any

import bcrypt
import jwt

from sessionauth.core.config import Settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128
# bcrypt only reads the first 72 bytes; longer passwords are rejected, never truncated.
PASSWORD_MAX_BYTES = 72

# 32 random bytes, URL-safe base64 (43 chars).
SESSION_ID_BYTES = 32

# Verified against when the username is unknown so both login failures cost one bcrypt check.
_DUMMY_HASH = bcrypt.hashpw(b"sessionauth-dummy-password", bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode(
    "utf-8"
)


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    pw_bytes = plain_password.encode("utf-8")
    if len(pw_bytes) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Over-long input never matches."""
    pw_bytes = plain_password.encode("utf-8")
    try:
        # Still spend the bcrypt check on over-long input so it costs the same as a miss.
        matched = bcrypt.checkpw(pw_bytes[:PASSWORD_MAX_BYTES], hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False
    return matched and len(pw_bytes) <= PASSWORD_MAX_BYTES


def verify_password_or_dummy(plain_password: str, hashed: str | None) -> bool:
    """verify_password, but still spends a bcrypt check when there is no stored hash."""
    if hashed is None:
        verify_password(plain_password, _DUMMY_HASH)
        return False
    return verify_password(plain_password, hashed)


def generate_session_id() -> str:
    return secrets.token_urlsafe(SESSION_ID_BYTES)


def sign_session_id(session_id: str, settings: Settings) -> str:
    """Wrap a session id in an HMAC-signed token suitable for a cookie value."""
    payload: dict[str, Any] = {"sid": session_id}
    return jwt.encode(
        payload,
        settings.SESSION_SECRET.get_secret_value(),
        algorithm=settings.SESSION_SIGNING_ALGORITHM,
    )


def unsign_session_id(cookie_value: str, settings: Settings) -> str | None:
    """
    Return the session id from a signed cookie value.
    Returns None when the signature or payload is invalid; expiry lives in the store.
    """
    try:
        payload = jwt.decode(
            cookie_value,
            settings.SESSION_SECRET.get_secret_value(),
            algorithms=[settings.SESSION_SIGNING_ALGORITHM],
        )
    except jwt.PyJWTError:
        return None
    sid = payload.get("sid")
    if not isinstance(sid, str) or not sid:
        return None
    return sid
