# grammatik/api/v1/dependencies.py
from zoneinfo import ZoneInfo

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from grammatik.core.config import settings
from grammatik.core.database import db_helper
from grammatik.core.exceptions import RateLimitError
from grammatik.core.schemas.auth import CurrentUser
from grammatik.core.security import get_current_user
from grammatik.repositories.rate_limit_repository import RateLimitRepository
from grammatik.services.rate_limiter import RateLimitService
from grammatik.services.rewards_calculator import RewardsCalculator


def get_rewards_calculator() -> RewardsCalculator:
    return RewardsCalculator(
        db_helper.session_factory,
        tz=ZoneInfo(settings.rewards.TIMEZONE),
        concurrency=settings.rewards.LEADERBOARD_CONCURRENCY,
    )


def get_rate_limit_service(
    session: AsyncSession = Depends(db_helper.session_getter),
) -> RateLimitService:
    return RateLimitService(RateLimitRepository(session), settings.rate_limit.operations)


def rate_limited(operation: str):
    """Зависимость, которая засчитывает запрос и отвечает 429 при превышении лимита"""
    async def dependency(
        current_user: CurrentUser = Depends(get_current_user),
        service: RateLimitService = Depends(get_rate_limit_service),
    ) -> None:
        result = await service.check(current_user.id, operation)
        if not result.allowed:
            raise RateLimitError(
                f"Too many requests. Try again in {result.retry_after} seconds",
                retry_after=result.retry_after,
            )
    return dependency
