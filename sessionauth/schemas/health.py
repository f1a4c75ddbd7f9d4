"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Body of GET /health."""

    status: Literal["ok"] = "ok"
    environment: str = Field(description="APP_ENV of the running instance")
    database: Literal["connected", "disconnected"] = Field(
        description="Result of a SELECT 1 against the user and session database",
    )
