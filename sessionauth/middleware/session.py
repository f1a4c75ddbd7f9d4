"""Server-side session middleware: signed cookie in, mutable request.session, store write-back out."""

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from sessionauth.core.security import generate_session_id, sign_session_id, unsign_session_id

if TYPE_CHECKING:
    from sessionauth.core.context import AppContext

logger = logging.getLogger(__name__)


class SessionData(dict):
    """
    Session payload exposed as request.session.

    Tracks whether a handler changed it so untouched sessions are never written
    and never produce a cookie.
    """

    def __init__(self, initial: dict[str, Any] | None = None, session_id: str | None = None) -> None:
        super().__init__(initial or {})
        self.session_id = session_id
        self.modified = False
        self.invalidated = False
        self.regenerate_requested = False

    def __setitem__(self, key: str, value: Any) -> None:
        self.modified = True
        super().__setitem__(key, value)

    def __delitem__(self, key: str) -> None:
        self.modified = True
        super().__delitem__(key)

    def clear(self) -> None:
        self.modified = True
        super().clear()

    def pop(self, key: str, *args: Any) -> Any:
        self.modified = True
        return super().pop(key, *args)

    def popitem(self) -> tuple[str, Any]:
        self.modified = True
        return super().popitem()

    def setdefault(self, key: str, default: Any = None) -> Any:
        if key not in self:
            self.modified = True
        return super().setdefault(key, default)

    def update(self, *args: Any, **kwargs: Any) -> None:
        self.modified = True
        super().update(*args, **kwargs)

    def regenerate(self) -> None:
        """Keep the payload but move it to a fresh session id on commit (login)."""
        self.regenerate_requested = True
        self.modified = True

    def invalidate(self) -> None:
        """Drop the payload and the stored record on commit (logout)."""
        self.clear()
        self.invalidated = True


class ServerSessionMiddleware(BaseHTTPMiddleware):
    """Resolve the session cookie before the handler runs and persist changes after it returns."""

    def __init__(self, app, context: "AppContext") -> None:  # type: ignore[override]
        super().__init__(app)
        self.context = context

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        settings = self.context.settings
        cookie_value = request.cookies.get(settings.SESSION_COOKIE_NAME)
        session = await self._load(cookie_value)
        request.scope["session"] = session

        response = await call_next(request)

        try:
            await self._commit(session, response, had_cookie=cookie_value is not None)
        except SQLAlchemyError:
            logger.exception("Failed to persist session for %s %s", request.method, request.url.path)
            return JSONResponse({"detail": "Internal server error."}, status_code=500)
        return response

    async def _load(self, cookie_value: str | None) -> SessionData:
        if not cookie_value:
            return SessionData()
        session_id = unsign_session_id(cookie_value, self.context.settings)
        if session_id is None:
            logger.debug("Ignoring session cookie with invalid signature")
            return SessionData()
        try:
            payload = await run_in_threadpool(self.context.session_store.load, session_id)
        except SQLAlchemyError:
            logger.exception("Failed to load session; continuing without one")
            return SessionData()
        if payload is None:
            return SessionData()
        return SessionData(payload, session_id=session_id)

    async def _commit(self, session: SessionData, response: Response, had_cookie: bool) -> None:
        if not (session.modified or session.invalidated):
            return
        settings = self.context.settings
        store = self.context.session_store
        previous_id = session.session_id
        drop_previous = previous_id is not None and (
            session.invalidated or session.regenerate_requested or not session
        )
        if drop_previous:
            await run_in_threadpool(store.destroy, previous_id)

        if not session:
            if had_cookie:
                response.delete_cookie(
                    settings.SESSION_COOKIE_NAME,
                    path="/",
                    secure=settings.SESSION_COOKIE_SECURE,
                    httponly=True,
                    samesite=settings.SESSION_COOKIE_SAMESITE,
                )
            return

        session_id = previous_id if previous_id is not None and not drop_previous else generate_session_id()
        await run_in_threadpool(store.save, session_id, dict(session))
        session.session_id = session_id
        response.set_cookie(
            settings.SESSION_COOKIE_NAME,
            sign_session_id(session_id, settings),
            max_age=settings.session_max_age_seconds,
            path="/",
            secure=settings.SESSION_COOKIE_SECURE,
            httponly=True,
            samesite=settings.SESSION_COOKIE_SAMESITE,
        )
