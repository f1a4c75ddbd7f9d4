"""
Create a user (e.g. first admin). Run from project root:
  python -m sessionauth.scripts.create_user USERNAME PASSWORD [role]
Example:
  python -m sessionauth.scripts.create_user admin your-secure-password admin
"""
import argparse
import sys

from sessionauth.core.config import get_settings
from sessionauth.core.database import build_engine, build_session_factory, init_db
from sessionauth.core.security import (
    PASSWORD_MAX_BYTES,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from sessionauth.models.user import ROLE_USER, ROLES
from sessionauth.services.users import UserStoreError, create_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a sessionauth user (the supported way to add admins).")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default=ROLE_USER, choices=list(ROLES))
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1
    if len(args.password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        print(f"Password must be at most {PASSWORD_MAX_BYTES} bytes.", file=sys.stderr)
        return 1

    settings = get_settings()
    engine = build_engine(settings)
    if settings.DATABASE_AUTO_CREATE:
        init_db(engine)
    db = build_session_factory(engine)()
    try:
        create_user(db, username, args.password, args.role)
    except UserStoreError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
        engine.dispose()
    print(f"Created user '{username}' with role '{args.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
