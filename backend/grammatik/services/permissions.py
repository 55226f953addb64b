# grammatik/services/permissions.py
from typing import Iterable, Optional
import logging

from grammatik.core.schemas.auth import UserPermissions
from grammatik.models.user import User, UserRole

logger = logging.getLogger(__name__)


class AdminPolicy:
    """
    Список админских email, собирается один раз при старте из настроек
    и передается туда, где нужны решения об авторизации.
    """
    def __init__(self, admin_emails: Iterable[str]):
        self.admin_emails = frozenset(email.strip().lower() for email in admin_emails if email.strip())

    def is_admin_email(self, email: Optional[str]) -> bool:
        return bool(email) and email.strip().lower() in self.admin_emails


# (max_exercises_per_day, max_questions_per_generation)
QUOTAS = {
    UserRole.ADMIN: (100, 20),
    UserRole.TEACHER: (20, 10),
    UserRole.STUDENT: (5, 5),
}


def resolve_role(profile: Optional[User], email: Optional[str], policy: AdminPolicy) -> UserRole:
    """Email из списка админов > роль в БД > student"""
    if policy.is_admin_email(email):
        return UserRole.ADMIN
    if profile is not None and profile.role:
        try:
            return UserRole(profile.role)
        except ValueError:
            logger.warning(f"Unknown role '{profile.role}' for user {profile.id}, using student")
    return UserRole.STUDENT


def get_user_permissions(profile: Optional[User], email: Optional[str], policy: AdminPolicy) -> UserPermissions:
    role = resolve_role(profile, email, policy)
    max_exercises, max_questions = QUOTAS[role]
    return UserPermissions(
        role=role.value,
        is_admin=role == UserRole.ADMIN,
        can_generate_exercises=role in (UserRole.ADMIN, UserRole.TEACHER),
        can_manage_content=role == UserRole.ADMIN,
        can_view_analytics=role in (UserRole.ADMIN, UserRole.TEACHER),
        max_exercises_per_day=max_exercises,
        max_questions_per_generation=max_questions,
    )
