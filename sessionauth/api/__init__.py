"""HTTP routes."""

from fastapi import APIRouter

from sessionauth.api import admin, auth, health

router = APIRouter()
router.include_router(auth.router, tags=["auth"])
router.include_router(admin.router, tags=["admin"])
router.include_router(health.router, tags=["health"])
