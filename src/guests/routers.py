from fastapi import APIRouter

from .features.login.router import router as login_router
from .features.logout.router import router as logout_router

router = APIRouter()

router.include_router(login_router)
router.include_router(logout_router)
