# grammatik/core/schemas/auth.py
from pydantic import BaseModel
from typing import Optional


class CurrentUser(BaseModel):
    """Пользователь из проверенного токена auth-провайдера"""
    id: str
    email: Optional[str] = None


class UserPermissions(BaseModel):
    role: str
    is_admin: bool
    can_generate_exercises: bool
    can_manage_content: bool
    can_view_analytics: bool
    max_exercises_per_day: int
    max_questions_per_generation: int
