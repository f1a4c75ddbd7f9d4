"""ORM model for server-side session records."""

from sqlalchemy import JSON, Column, DateTime, String

from sessionauth.models.base import Base


class SessionRecord(Base):
    """
    Payload of one browser session, keyed by the id carried in the signed cookie.

    expires_at is stored in UTC; a record at or past it is treated as absent.
    """

    __tablename__ = "sessions"

    id = Column(String(64), primary_key=True)
    payload = Column(JSON, nullable=False, default=dict)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
