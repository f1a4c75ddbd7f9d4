"""Request dependencies: app context, session payload and the access guard."""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sessionauth.core.config import Settings
from sessionauth.core.context import AppContext
from sessionauth.core.database import get_db
from sessionauth.middleware.session import SessionData
from sessionauth.models.user import ROLE_ADMIN, User
from sessionauth.services.users import get_user_by_id

logger = logging.getLogger(__name__)

# Session payload key holding the logged-in user's id.
SESSION_USER_KEY = "userId"


class AccessLevel(str, Enum):
    NONE = "none"
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_app_settings(context: Annotated[AppContext, Depends(get_context)]) -> Settings:
    return context.settings


def get_session_data(request: Request) -> SessionData:
    """The mutable session payload installed by ServerSessionMiddleware."""
    return request.session


def server_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error.",
    )


def require_access(level: AccessLevel) -> Callable[..., User | None]:
    """
    Build a dependency that admits a request only at the given access level.

    none: always passes (returns None).
    authenticated: 401 without a session user, 404 if that user no longer exists.
    admin: 401 without a session user, 403 unless the user exists with role 'admin'.
    A failed user lookup is 500. Returns the User when one was loaded.
    """

    def dependency(
        session: Annotated[SessionData, Depends(get_session_data)],
        db: Annotated[Session, Depends(get_db)],
    ) -> User | None:
        if level is AccessLevel.NONE:
            return None

        user_id = session.get(SESSION_USER_KEY)
        if user_id is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not authenticated.",
            )
        try:
            user = get_user_by_id(db, int(user_id))
        except (TypeError, ValueError):
            user = None
        except SQLAlchemyError:
            logger.exception("User lookup failed for session user id=%s", user_id)
            raise server_error()

        if level is AccessLevel.ADMIN:
            if user is None or user.role != ROLE_ADMIN:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Admin access required.",
                )
            return user

        if user is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found.",
            )
        return user

    dependency.__name__ = f"require_{level.value}"
    return dependency


get_current_user = require_access(AccessLevel.AUTHENTICATED)
require_admin = require_access(AccessLevel.ADMIN)
