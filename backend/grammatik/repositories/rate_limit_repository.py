# grammatik/repositories/rate_limit_repository.py
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy import select, delete, case, or_
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession
from grammatik.models.system import RateLimitCounter

class RateLimitRepository:
    """Счетчики fixed-window в общей таблице, чтобы лимит работал на нескольких инстансах"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def hit(
        self,
        key: str,
        max_requests: int,
        window: timedelta,
        now: datetime
    ) -> Optional[RateLimitCounter]:
        """
        Атомарно засчитать запрос.
        Истекшее окно начинается заново; в активном окне счетчик растет только
        пока не достигнут лимит. Возвращает None, если запрос заблокирован.
        """
        expired = RateLimitCounter.reset_at <= now
        stmt = (
            insert(RateLimitCounter)
            .values(key=key, count=1, reset_at=now + window)
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[RateLimitCounter.key],
            set_={
                "count": case((expired, 1), else_=RateLimitCounter.count + 1),
                "reset_at": case((expired, stmt.excluded.reset_at), else_=RateLimitCounter.reset_at),
            },
            where=or_(expired, RateLimitCounter.count < max_requests),
        ).returning(RateLimitCounter).execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        counter = result.scalar_one_or_none()
        await self.session.commit()
        return counter

    async def get(self, key: str) -> Optional[RateLimitCounter]:
        stmt = select(RateLimitCounter).where(RateLimitCounter.key == key)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete(self, key: str) -> int:
        stmt = delete(RateLimitCounter).where(RateLimitCounter.key == key)
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount

    async def delete_by_prefix(self, prefix: str) -> int:
        """Удалить все окна пользователя (ключи вида '<user_id>:...')"""
        stmt = delete(RateLimitCounter).where(RateLimitCounter.key.startswith(prefix, autoescape=True))
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount

    async def delete_expired(self, now: datetime) -> int:
        stmt = delete(RateLimitCounter).where(RateLimitCounter.reset_at <= now)
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount
