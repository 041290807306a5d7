from fastapi import APIRouter

from app.core.config import settings
from app.services.barter_state_machine import BarterStatus, TERMINAL_STATUSES

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/config/public")
async def public_config() -> dict:
    """Public barter configuration (statuses, list limits)."""
    return {
        "barter_statuses": [s.value for s in BarterStatus],
        "terminal_statuses": sorted(s.value for s in TERMINAL_STATUSES),
        "barter_list_default_limit": settings.barter_list_default_limit,
        "barter_list_max_limit": settings.barter_list_max_limit,
    }
