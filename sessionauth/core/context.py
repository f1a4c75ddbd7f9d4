"""Per-application container for store handles, built at startup and closed at shutdown."""

from dataclasses import dataclass, field
from datetime import timedelta

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from sessionauth.core.clock import Clock, utc_now
from sessionauth.core.config import Settings
from sessionauth.core.database import build_engine, build_session_factory
from sessionauth.services.session_store import SessionStore


@dataclass
class AppContext:
    """Everything a request needs from the outside world, passed explicitly instead of module globals."""

    settings: Settings
    engine: Engine
    session_factory: sessionmaker[Session]
    session_store: SessionStore
    clock: Clock = field(default=utc_now)

    def close(self) -> None:
        self.engine.dispose()


def build_context(settings: Settings, clock: Clock = utc_now, engine: Engine | None = None) -> AppContext:
    """Create the engine (unless given), session factory and session store for settings."""
    engine = engine or build_engine(settings)
    session_factory = build_session_factory(engine)
    store = SessionStore(
        session_factory,
        max_age=timedelta(milliseconds=settings.SESSION_MAX_AGE_MS),
        clock=clock,
    )
    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        session_store=store,
        clock=clock,
    )
