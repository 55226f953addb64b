# grammatik/api/v1/routes/admin.py
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from grammatik.api.v1.dependencies import get_rate_limit_service, get_rewards_calculator, rate_limited
from grammatik.api.v1.routes.rewards import build_rewards_response
from grammatik.core.database import db_helper
from grammatik.core.exceptions import NotFoundError, StatsUnavailableError
from grammatik.core.schemas.rate_limit import RateLimitCleanupResponse, RateLimitResetResponse
from grammatik.core.schemas.rewards import RewardsResponse
from grammatik.core.security import require_admin
from grammatik.repositories.user_repository import UserRepository
from grammatik.services.rate_limiter import RateLimitService
from grammatik.services.rewards_calculator import RewardsCalculator

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin), Depends(rate_limited("admin_operations"))],
)


@router.get("/users/{user_id}/rewards", response_model=RewardsResponse)
async def get_user_rewards(
    user_id: str,
    session: AsyncSession = Depends(db_helper.session_getter),
    calculator: RewardsCalculator = Depends(get_rewards_calculator),
):
    """Статистика любого пользователя"""
    if await UserRepository(session).get_by_id(user_id) is None:
        raise NotFoundError(f"User {user_id} not found")
    stats = await calculator.calculate_user_stats(user_id)
    if stats is None:
        raise StatsUnavailableError()
    return build_rewards_response(user_id, stats)


@router.delete("/rate-limits/{user_id}", response_model=RateLimitResetResponse)
async def reset_user_rate_limits(
    user_id: str,
    operation: Optional[str] = Query(None, description="Сбросить только эту операцию"),
    service: RateLimitService = Depends(get_rate_limit_service),
):
    """Сбросить лимиты пользователя"""
    message = await service.reset(user_id, operation)
    return RateLimitResetResponse(message=message)


@router.post("/rate-limits/cleanup", response_model=RateLimitCleanupResponse)
async def cleanup_rate_limits(
    service: RateLimitService = Depends(get_rate_limit_service),
):
    """Удалить истекшие окна"""
    cleaned = await service.cleanup_expired()
    return RateLimitCleanupResponse(cleaned=cleaned)
