# grammatik/core/security.py
from typing import Any, Dict, Optional
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError
from jose.exceptions import ExpiredSignatureError
from sqlalchemy.ext.asyncio import AsyncSession

from grammatik.core.config import settings
from grammatik.core.database import db_helper
from grammatik.core.exceptions import AuthenticationError, AuthorizationError
from grammatik.core.schemas.auth import CurrentUser
from grammatik.repositories.user_repository import UserRepository
from grammatik.services.permissions import AdminPolicy, get_user_permissions

logger = logging.getLogger(__name__)
bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str) -> Dict[str, Any]:
    """Декодирование и валидация JWT токена auth-провайдера"""
    try:
        payload = jwt.decode(
            token,
            settings.security.JWT_SECRET_KEY.get_secret_value(),
            algorithms=[settings.security.JWT_ALGORITHM],
            audience=settings.security.JWT_AUDIENCE,
        )
        return payload
    except ExpiredSignatureError:
        raise ValueError("Token expired")
    except JWTError:
        raise ValueError("Invalid token")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """Зависимость для получения текущего пользователя из токена"""
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    try:
        payload = decode_token(credentials.credentials)
    except ValueError as e:
        logger.warning(f"Authentication failed: {e}")
        raise AuthenticationError(str(e))

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token payload")
    return CurrentUser(id=str(user_id), email=payload.get("email"))


def get_admin_policy(request: Request) -> AdminPolicy:
    """Политика создается в lifespan и хранится в app.state"""
    return request.app.state.admin_policy


async def require_admin(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(db_helper.session_getter),
    policy: AdminPolicy = Depends(get_admin_policy),
) -> CurrentUser:
    """Пропускает только администраторов"""
    profile = await UserRepository(session).get_by_id(current_user.id)
    permissions = get_user_permissions(profile, current_user.email, policy)
    if not permissions.is_admin:
        logger.warning(f"Non-admin user {current_user.id} attempted admin operation")
        raise AuthorizationError("Admin permissions required")
    return current_user
