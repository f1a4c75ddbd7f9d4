"""Admin-only routes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from sessionauth.api.deps import require_admin
from sessionauth.models.user import User
from sessionauth.schemas.auth import AdminDashboardResponse

router = APIRouter()


@router.get("/admin", response_model=AdminDashboardResponse)
def admin_dashboard(_admin: Annotated[User, Depends(require_admin)]) -> AdminDashboardResponse:
    return AdminDashboardResponse()
