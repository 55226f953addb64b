# grammatik/services/rate_limiter.py
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional
import math
import logging

from grammatik.core.config import RateLimitRule
from grammatik.core.schemas.rate_limit import RateLimitResult
from grammatik.repositories.rate_limit_repository import RateLimitRepository

logger = logging.getLogger(__name__)

# Для неизвестных операций лимит не применяется
UNKNOWN_OPERATION_LIMIT = 1000


class RateLimitService:
    """Fixed-window rate limit поверх общей таблицы счетчиков"""

    def __init__(
        self,
        repository: RateLimitRepository,
        rules: Dict[str, RateLimitRule],
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.repository = repository
        self.rules = rules
        self.clock = clock

    @staticmethod
    def make_key(user_id: str, operation: str) -> str:
        return f"{user_id}:{operation}"

    def _unlimited(self, now: datetime) -> RateLimitResult:
        return RateLimitResult(
            allowed=True,
            limit=UNKNOWN_OPERATION_LIMIT,
            remaining=UNKNOWN_OPERATION_LIMIT - 1,
            reset_at=now + timedelta(minutes=1),
        )

    @staticmethod
    def _seconds_until(reset_at: datetime, now: datetime) -> int:
        return max(0, math.ceil((reset_at - now).total_seconds()))

    async def check(self, user_id: str, operation: str) -> RateLimitResult:
        """Засчитать запрос и вернуть, разрешен ли он"""
        now = self.clock()
        rule = self.rules.get(operation)
        if rule is None:
            logger.warning(f"Unknown rate limit operation: {operation}")
            return self._unlimited(now)

        key = self.make_key(user_id, operation)
        counter = await self.repository.hit(
            key,
            max_requests=rule.max_requests,
            window=timedelta(seconds=rule.window_seconds),
            now=now,
        )

        if counter is not None:
            return RateLimitResult(
                allowed=True,
                limit=rule.max_requests,
                remaining=max(0, rule.max_requests - counter.count),
                reset_at=counter.reset_at,
            )

        # Заблокировано: окно активно и лимит исчерпан
        existing = await self.repository.get(key)
        reset_at = existing.reset_at if existing else now + timedelta(seconds=rule.window_seconds)
        logger.info(f"Rate limit exceeded for {key}")
        return RateLimitResult(
            allowed=False,
            limit=rule.max_requests,
            remaining=0,
            reset_at=reset_at,
            retry_after=self._seconds_until(reset_at, now),
        )

    async def status(self, user_id: str, operation: str) -> RateLimitResult:
        """Текущее состояние без увеличения счетчика"""
        now = self.clock()
        rule = self.rules.get(operation)
        if rule is None:
            return self._unlimited(now)

        counter = await self.repository.get(self.make_key(user_id, operation))
        if counter is None or counter.reset_at <= now:
            return RateLimitResult(
                allowed=True,
                limit=rule.max_requests,
                remaining=rule.max_requests,
                reset_at=now + timedelta(seconds=rule.window_seconds),
            )

        remaining = max(0, rule.max_requests - counter.count)
        allowed = remaining > 0
        return RateLimitResult(
            allowed=allowed,
            limit=rule.max_requests,
            remaining=remaining,
            reset_at=counter.reset_at,
            retry_after=None if allowed else self._seconds_until(counter.reset_at, now),
        )

    async def status_all(self, user_id: str) -> Dict[str, RateLimitResult]:
        return {operation: await self.status(user_id, operation) for operation in self.rules}

    async def reset(self, user_id: str, operation: Optional[str] = None) -> str:
        """Сбросить лимиты пользователя; возвращает сообщение для ответа API"""
        if operation:
            await self.repository.delete(self.make_key(user_id, operation))
            logger.info(f"Reset rate limit for {user_id}:{operation}")
            return f"Rate limit reset for {operation}"

        deleted = await self.repository.delete_by_prefix(f"{user_id}:")
        logger.info(f"Reset all rate limits for {user_id} ({deleted} operations)")
        return f"All rate limits reset ({deleted} operations)"

    async def cleanup_expired(self) -> int:
        cleaned = await self.repository.delete_expired(self.clock())
        if cleaned:
            logger.info(f"Cleaned up {cleaned} expired rate limit entries")
        return cleaned
