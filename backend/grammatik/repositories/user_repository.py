# grammatik/repositories/user_repository.py
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from grammatik.models.user import User

# Лидерборд считается максимум по стольким пользователям
LEADERBOARD_USER_CAP = 100

class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Получить пользователя по ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_leaderboard(self, limit: int = LEADERBOARD_USER_CAP) -> List[User]:
        """Пользователи-кандидаты для лидерборда в стабильном порядке"""
        stmt = select(User).order_by(User.id).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
