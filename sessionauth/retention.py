"""
CLI entrypoint for the session retention job. Run from cron, e.g.:

  python -m sessionauth.retention

Or hourly: 0 * * * * cd /path/to/sessionauth && .venv/bin/python -m sessionauth.retention
"""

import logging
import sys

from sessionauth.core.config import get_settings
from sessionauth.core.database import build_engine, build_session_factory, init_db
from sessionauth.core.logging import configure_logging
from sessionauth.services.retention import run_retention

logger = logging.getLogger(__name__)


def main() -> int:
    """Run retention: delete sessions past their expiry."""
    settings = get_settings()
    configure_logging(settings)
    engine = build_engine(settings)
    if settings.DATABASE_AUTO_CREATE:
        init_db(engine)
    db = build_session_factory(engine)()
    try:
        sessions_deleted = run_retention(db, settings)
        logger.info("Retention completed: sessions_deleted=%s", sessions_deleted)
        return 0
    except Exception as e:
        logger.exception("Retention job failed: %s", e)
        return 1
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
