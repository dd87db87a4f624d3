"""Health check endpoint.

Liveness only: the conversation service is never contacted, the response
just reports whether its credentials are configured.
"""

from __future__ import annotations

from fastapi import APIRouter

from src.recap.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic liveness check."""
    settings = get_settings()
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT.value,
        "remote_configured": settings.remote_configured,
    }
