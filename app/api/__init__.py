from fastapi import APIRouter

from app.api.auth import router as auth_router
from app.api.completions import router as completions_router
from app.api.habits import router as habits_router
from app.api.notifications import router as notifications_router
from app.api.partners import router as partners_router
from app.api.progress import router as progress_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(habits_router)
router.include_router(completions_router)
router.include_router(progress_router)
router.include_router(partners_router)
router.include_router(notifications_router)

__all__ = ["router"]
