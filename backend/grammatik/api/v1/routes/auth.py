# grammatik/api/v1/routes/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from grammatik.core.database import db_helper
from grammatik.core.schemas.auth import CurrentUser, UserPermissions
from grammatik.core.security import get_admin_policy, get_current_user
from grammatik.repositories.user_repository import UserRepository
from grammatik.services.permissions import AdminPolicy, get_user_permissions

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/permissions", response_model=UserPermissions)
async def get_my_permissions(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(db_helper.session_getter),
    policy: AdminPolicy = Depends(get_admin_policy),
):
    """Права текущего пользователя"""
    profile = await UserRepository(session).get_by_id(current_user.id)
    return get_user_permissions(profile, current_user.email, policy)
