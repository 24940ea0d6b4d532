from fastapi import APIRouter

from notegen.config import settings
from notegen.services.connection_manager import manager

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    """Liveness check with the configured model and open generation sockets."""
    return {
        "status": "ok",
        "model": settings.get_llm_model(),
        "connections": manager.active_count,
    }
