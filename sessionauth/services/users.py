"""User store operations: create, look up and authenticate users."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sessionauth.core.security import hash_password, verify_password_or_dummy
from sessionauth.models.user import ROLE_USER, ROLES, User

logger = logging.getLogger(__name__)


class UserStoreError(Exception):
    """Base for user-store failures the HTTP layer reports as 400."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UsernameTakenError(UserStoreError):
    """A user with this username already exists."""


class InvalidRoleError(UserStoreError):
    """Role is not one of ROLES."""


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


def create_user(db: Session, username: str, password: str, role: str = ROLE_USER) -> User:
    """
    Insert a user with a bcrypt password hash.

    Uniqueness is enforced by the users.username unique index; a violation is
    rolled back and raised as UsernameTakenError.
    """
    if role not in ROLES:
        raise InvalidRoleError(f"Unknown role '{role}'.")
    user = User(username=username, password_hash=hash_password(password), role=role)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise UsernameTakenError(f"User '{username}' already exists.") from e
    db.refresh(user)
    logger.info("Created user id=%s username=%s role=%s", user.id, user.username, user.role)
    return user


def authenticate_user(db: Session, username: str, password: str) -> User | None:
    """Return the user when username and password match, else None. Failure causes are not distinguished."""
    user = get_user_by_username(db, username)
    if not verify_password_or_dummy(password, user.password_hash if user else None):
        return None
    return user
