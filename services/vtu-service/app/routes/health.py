"""
Health check routes for vtu service
"""

from datetime import datetime, timezone
from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness check; does not touch either upstream"""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
