"""Database-backed session store: load, save and destroy session records, plus expiry purge."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from sessionauth.core.clock import Clock, utc_now
from sessionauth.models import SessionRecord

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything stored is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class SessionStore:
    """
    Persistence for session payloads with passive expiry.

    Each call opens and closes its own DB session so the store can be used from
    middleware, outside any request-scoped dependency.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        max_age: timedelta,
        clock: Clock = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self.max_age = max_age
        self.clock = clock

    def load(self, session_id: str) -> dict[str, Any] | None:
        """Return the payload for session_id, or None if unknown or expired (expired rows are removed)."""
        with self._session_factory() as db:
            record = db.get(SessionRecord, session_id)
            if record is None:
                return None
            if _as_utc(record.expires_at) <= self.clock():
                db.delete(record)
                db.commit()
                logger.debug("Session expired and removed: %s...", session_id[:8])
                return None
            return dict(record.payload or {})

    def save(self, session_id: str, payload: dict[str, Any]) -> datetime:
        """Insert or replace the payload under session_id; returns the new expiry."""
        expires_at = self.clock() + self.max_age
        with self._session_factory() as db:
            record = db.get(SessionRecord, session_id)
            if record is None:
                record = SessionRecord(id=session_id)
                db.add(record)
            record.payload = dict(payload)
            record.expires_at = expires_at
            db.commit()
        return expires_at

    def destroy(self, session_id: str) -> bool:
        """Delete the record; returns True if one existed."""
        with self._session_factory() as db:
            deleted = (
                db.query(SessionRecord)
                .filter(SessionRecord.id == session_id)
                .delete(synchronize_session=False)
            )
            db.commit()
        return deleted > 0


def purge_expired_sessions(db: Session, now: datetime) -> int:
    """Delete sessions with expires_at <= now and commit; returns the number deleted."""
    deleted_count = (
        db.query(SessionRecord)
        .filter(SessionRecord.expires_at <= now)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted_count
