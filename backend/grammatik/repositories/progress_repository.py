# grammatik/repositories/progress_repository.py
from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from grammatik.models.progress import UserProgress
from grammatik.core.schemas.rewards import CompletionRecord

class ProgressRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user(self, user_id: str) -> List[CompletionRecord]:
        """Все записи прогресса пользователя"""
        stmt = (
            select(UserProgress)
            .where(UserProgress.user_id == user_id)
            .order_by(UserProgress.id)
        )
        result = await self.session.execute(stmt)
        return [CompletionRecord.model_validate(row) for row in result.scalars().all()]
