"""Main router for API v1."""

from fastapi import APIRouter

from deploy_wizard.api.v1 import health, sessions

router = APIRouter(prefix="/v1")

# Include sub-routers
router.include_router(health.router, tags=["health"])
router.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
