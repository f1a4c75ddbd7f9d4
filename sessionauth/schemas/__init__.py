"""Pydantic request/response schemas."""

from sessionauth.schemas.auth import (
    AdminDashboardResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserResponse,
)
from sessionauth.schemas.health import HealthResponse

__all__ = [
    "AdminDashboardResponse",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "UserResponse",
]
