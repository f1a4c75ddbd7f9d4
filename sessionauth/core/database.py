"""Database engine, session factory and request-scoped DB sessions."""

import logging
from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from sessionauth.core.config import Settings
from sessionauth.models.base import Base

logger = logging.getLogger(__name__)


def _log_engine_error(exception_context) -> None:
    """Report every DBAPI error once, at the engine, whatever request triggered it."""
    logger.error(
        "Database error (connection_invalidated=%s): %s",
        exception_context.is_disconnect,
        exception_context.original_exception,
    )


def build_engine(settings: Settings) -> Engine:
    """Create the engine for DATABASE_URL and attach the error listener."""
    url = settings.DATABASE_URL
    kwargs: dict = {"echo": settings.DEBUG}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise each checkout sees an empty database.
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    engine = create_engine(url, **kwargs)
    event.listen(engine, "handle_error", _log_engine_error)
    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create missing tables. Alembic owns the schema outside development."""
    import sessionauth.models  # noqa: F401 register all models with Base.metadata

    Base.metadata.create_all(engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session from the app context and closes it when done."""
    db = request.app.state.context.session_factory()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
