"""Session retention: delete session records whose expiry has passed."""

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from sessionauth.core.clock import utc_now
from sessionauth.services.session_store import purge_expired_sessions

if TYPE_CHECKING:
    from sessionauth.core.config import Settings

logger = logging.getLogger(__name__)


def run_retention(session: Session, settings: "Settings", now: datetime | None = None) -> int:
    """
    Delete sessions with expires_at at or before now.

    Returns the number of sessions deleted. Idempotent: safe to run repeatedly.
    """
    if not settings.SESSION_RETENTION_ENABLED:
        logger.info("Retention is disabled (SESSION_RETENTION_ENABLED=false); skipping.")
        return 0

    cutoff = now or utc_now()
    deleted_count = purge_expired_sessions(session, cutoff)

    if deleted_count > 0:
        logger.info(
            "Retention run: cutoff=%s, sessions_deleted=%s",
            cutoff.isoformat(),
            deleted_count,
        )
    return deleted_count
