from fastapi import APIRouter

from mindflow.api.routes import health, journaling


router = APIRouter()

router.include_router(journaling.router)
router.include_router(health.router)
