"""Request/response schemas for auth endpoints."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from sessionauth.core.security import (
    PASSWORD_MAX_BYTES,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)


class RegisterRequest(BaseModel):
    """New account. role defaults to 'user'; 'admin' is subject to ALLOW_ADMIN_REGISTRATION."""

    username: str = Field(..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username")
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password")
    role: Literal["admin", "user"] = Field(default="user", description="Requested role")

    @field_validator("password")
    @classmethod
    def validate_password_bytes(cls, v: str) -> str:
        if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes")
        return v


class LoginRequest(BaseModel):
    """Credentials for login."""

    # Presence only: any credentials that cannot match get the generic 401, never a 400.
    username: str = Field(..., description="Username")
    password: str = Field(..., description="Password")


class UserResponse(BaseModel):
    """Public view of a user (no password material)."""

    id: int
    username: str
    role: str

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str


class AdminDashboardResponse(BaseModel):
    """Static payload for GET /admin."""

    message: str = Field(default="Welcome to the admin dashboard.")
