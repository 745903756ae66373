"""Match router bundle."""

from fastapi import APIRouter

from . import cms, public

router = APIRouter()
router.include_router(public.router)
router.include_router(cms.router)

__all__ = ["router"]
