"""SQLAlchemy ORM models."""

from sessionauth.models.base import Base
from sessionauth.models.session import SessionRecord
from sessionauth.models.user import User

__all__ = ["Base", "SessionRecord", "User"]
