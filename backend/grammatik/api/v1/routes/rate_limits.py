# grammatik/api/v1/routes/rate_limits.py
from fastapi import APIRouter, Depends

from grammatik.api.v1.dependencies import get_rate_limit_service
from grammatik.core.schemas.auth import CurrentUser
from grammatik.core.schemas.rate_limit import RateLimitOverview
from grammatik.core.security import get_current_user
from grammatik.services.rate_limiter import RateLimitService

router = APIRouter(prefix="/rate-limits", tags=["rate-limits"])


@router.get("", response_model=RateLimitOverview)
async def get_my_rate_limits(
    current_user: CurrentUser = Depends(get_current_user),
    service: RateLimitService = Depends(get_rate_limit_service),
):
    """Состояние лимитов текущего пользователя по всем операциям"""
    operations = await service.status_all(current_user.id)
    return RateLimitOverview(user_id=current_user.id, operations=operations)
