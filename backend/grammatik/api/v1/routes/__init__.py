from fastapi import APIRouter
from .auth import router as auth_router
from .rewards import router as rewards_router
from .rate_limits import router as rate_limits_router
from .admin import router as admin_router


api_router = APIRouter()

api_router.include_router(auth_router)
api_router.include_router(rewards_router)
api_router.include_router(rate_limits_router)
api_router.include_router(admin_router)
