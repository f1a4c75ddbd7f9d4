"""Registration, login/logout and the current user's profile."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sessionauth.api.deps import (
    SESSION_USER_KEY,
    get_app_settings,
    get_current_user,
    get_session_data,
    server_error,
)
from sessionauth.core.config import Settings
from sessionauth.core.database import get_db
from sessionauth.middleware.session import SessionData
from sessionauth.models.user import ROLE_ADMIN, User
from sessionauth.schemas.auth import LoginRequest, MessageResponse, RegisterRequest, UserResponse
from sessionauth.services.users import UserStoreError, authenticate_user, create_user

logger = logging.getLogger(__name__)

router = APIRouter()

REGISTRATION_FAILED_DETAIL = "Registration failed."
INVALID_CREDENTIALS_DETAIL = "Invalid username or password."


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UserResponse:
    """
    Create an account. The password is stored as a bcrypt hash.
    Any failure (taken username, refused role) is a 400 with the same message.
    """
    if body.role == ROLE_ADMIN and not settings.ALLOW_ADMIN_REGISTRATION:
        logger.warning("Refused self-registration with role=admin for username=%s", body.username)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=REGISTRATION_FAILED_DETAIL)
    try:
        user = create_user(db, body.username, body.password, body.role)
    except UserStoreError as e:
        logger.info("Registration rejected for username=%s: %s", body.username, e.message)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=REGISTRATION_FAILED_DETAIL)
    except SQLAlchemyError:
        logger.exception("Registration failed for username=%s", body.username)
        raise server_error()
    return UserResponse.model_validate(user)


@router.post("/login", response_model=MessageResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    session: Annotated[SessionData, Depends(get_session_data)],
) -> MessageResponse:
    """Check credentials and bind the user to a freshly issued session."""
    try:
        user = authenticate_user(db, body.username, body.password)
    except SQLAlchemyError:
        logger.exception("Login lookup failed for username=%s", body.username)
        raise server_error()
    if user is None:
        logger.info("Login failed for username=%s", body.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS_DETAIL)

    session.regenerate()
    session[SESSION_USER_KEY] = user.id
    logger.info("Login succeeded for user id=%s", user.id)
    return MessageResponse(message="Login successful.")


@router.post("/logout", response_model=MessageResponse)
def logout(session: Annotated[SessionData, Depends(get_session_data)]) -> MessageResponse:
    """End the current session. Succeeds whether or not one exists."""
    user_id = session.get(SESSION_USER_KEY)
    session.invalidate()
    if user_id is not None:
        logger.info("Logout for user id=%s", user_id)
    return MessageResponse(message="Logged out.")


@router.get("/profile", response_model=UserResponse)
def profile(user: Annotated[User, Depends(get_current_user)]) -> UserResponse:
    return UserResponse.model_validate(user)
