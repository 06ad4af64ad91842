from datetime import datetime, timezone

from fastapi import APIRouter

from mindflow import __version__
from mindflow.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Liveness probe with the model the service analyses entries with."""
    return {
        "status": "healthy",
        "version": __version__,
        "model": settings.MINDFLOW_MODEL,
        "time": datetime.now(timezone.utc).isoformat(),
    }
