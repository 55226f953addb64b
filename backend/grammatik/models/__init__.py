# grammatik/models/__init__.py
from .base import Base
from .user import User, UserRole, SpanishLevel
from .progress import UserProgress
from .system import RateLimitCounter

# Этот список нужен, чтобы IDE и инструменты видели, что экспортируется
__all__ = [
    "Base",
    "User", "UserRole", "SpanishLevel",
    "UserProgress",
    "RateLimitCounter",
]
