# grammatik/services/rewards_calculator.py
"""
Сборка статистики пользователя из строк user_progress и лидерборд.

Статистика нигде не хранится: каждый запрос пересчитывает ее из записей,
поэтому два расчета по одинаковым данным дают одинаковый результат.
"""
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence
import asyncio
import enum
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from grammatik.core.schemas.rewards import CompletionRecord, LeaderboardEntry, UserStats
from grammatik.repositories.progress_repository import ProgressRepository
from grammatik.repositories.user_repository import LEADERBOARD_USER_CAP, UserRepository
from grammatik.services.rewards import (
    calculate_progress_to_next_medal,
    calculate_xp,
    generate_achievements,
    get_current_medal,
    get_next_medal,
)
from grammatik.services.streaks import calculate_streak

logger = logging.getLogger(__name__)

PERFECT_SCORE = 100
# Старые записи без question_results: score >= 70 засчитывается как один правильный ответ
SCORE_HEURISTIC_THRESHOLD = 70


class ResultSource(str, enum.Enum):
    STRUCTURED = "structured"           # список результатов по вопросам
    LEGACY_SINGLE = "legacy_single"     # один объект результата
    SCORE_HEURISTIC = "score_heuristic" # только score


class RecordTally(NamedTuple):
    source: ResultSource
    answered: int
    correct: int


def _tally_structured(results: List[Any]) -> RecordTally:
    correct = sum(1 for item in results if isinstance(item, dict) and bool(item.get("correct")))
    return RecordTally(ResultSource.STRUCTURED, answered=len(results), correct=correct)


def _tally_legacy_single(result: Dict[str, Any]) -> RecordTally:
    correct = 1 if result.get("correct") else 0
    return RecordTally(ResultSource.LEGACY_SINGLE, answered=1, correct=correct)


def _tally_score_heuristic(score: int) -> RecordTally:
    # Приближение с потерей точности, оставлено для совместимости со старыми данными
    if score >= SCORE_HEURISTIC_THRESHOLD:
        return RecordTally(ResultSource.SCORE_HEURISTIC, answered=1, correct=1)
    return RecordTally(ResultSource.SCORE_HEURISTIC, answered=0, correct=0)


def tally_record(record: CompletionRecord) -> RecordTally:
    """Вклад одной записи в questions_answered/correct_answers"""
    results = record.question_results
    if isinstance(results, list):
        return _tally_structured(results)
    if isinstance(results, dict):
        return _tally_legacy_single(results)
    return _tally_score_heuristic(record.score or 0)


def accuracy_percentage(correct_answers: int, questions_answered: int) -> int:
    """Точность в процентах, округление половины вверх"""
    if questions_answered <= 0:
        return 0
    return (200 * correct_answers + questions_answered) // (2 * questions_answered)


def with_medals(stats: UserStats) -> UserStats:
    current_medal = get_current_medal(stats)
    next_medal = get_next_medal(current_medal)
    return stats.model_copy(update={
        "current_medal": current_medal,
        "next_medal": next_medal,
        "progress_to_next": calculate_progress_to_next_medal(stats, next_medal),
    })


def build_user_stats(
    records: Sequence[CompletionRecord],
    today: Optional[date] = None,
    tz: tzinfo = timezone.utc,
) -> UserStats:
    """Полный снимок статистики по всем записям одного пользователя"""
    if not records:
        return with_medals(UserStats())

    questions_answered = 0
    correct_answers = 0
    perfect_scores = 0

    for record in records:
        tally = tally_record(record)
        questions_answered += tally.answered
        correct_answers += tally.correct
        if record.score == PERFECT_SCORE:
            perfect_scores += 1

    streak = calculate_streak(records, today=today, tz=tz)

    stats = UserStats(
        total_xp=calculate_xp(correct_answers, perfect_scores),
        current_streak=streak.current_streak,
        longest_streak=streak.longest_streak,
        questions_answered=questions_answered,
        correct_answers=correct_answers,
        accuracy_percentage=accuracy_percentage(correct_answers, questions_answered),
    )
    return with_medals(stats)


class RewardsCalculator:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        tz: tzinfo = timezone.utc,
        concurrency: int = 10,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.session_factory = session_factory
        self.tz = tz
        self.concurrency = concurrency
        self.clock = clock

    def today(self) -> date:
        return self.clock().astimezone(self.tz).date()

    async def calculate_user_stats(self, user_id: str, today: Optional[date] = None) -> Optional[UserStats]:
        """
        Статистика пользователя или None, если прогресс не удалось прочитать.
        None означает "статистика недоступна", а не "нет активности".
        """
        try:
            async with self.session_factory() as session:
                records = await ProgressRepository(session).get_by_user(user_id)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error fetching user progress for {user_id}: {e}")
            return None
        except Exception:
            # Ошибка одного пользователя не должна ронять лидерборд
            logger.exception(f"Unexpected error fetching user progress for {user_id}")
            return None

        return build_user_stats(records, today=today or self.today(), tz=self.tz)

    async def calculate_leaderboard(self, limit: int = 10) -> List[LeaderboardEntry]:
        """
        Топ пользователей по XP.
        Пользователи, для которых статистику посчитать не удалось, пропускаются.
        При равном XP сохраняется порядок выборки пользователей.
        """
        try:
            async with self.session_factory() as session:
                users = await UserRepository(session).list_for_leaderboard(LEADERBOARD_USER_CAP)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error fetching users for leaderboard: {e}")
            return []

        if not users:
            return []

        today = self.today()
        semaphore = asyncio.Semaphore(self.concurrency)

        async def entry_for(user) -> Optional[LeaderboardEntry]:
            async with semaphore:
                stats = await self.calculate_user_stats(user.id, today=today)
            if stats is None:
                logger.warning(f"Leaderboard: no stats for user {user.id}, skipping")
                return None
            return LeaderboardEntry(
                **stats.model_dump(),
                user_id=user.id,
                email=user.email,
                display_name=user.full_name or user.email or "Anonymous",
                achievements_count=len(generate_achievements(stats)),
            )

        results = await asyncio.gather(*(entry_for(user) for user in users))
        entries = [entry for entry in results if entry is not None]

        # sort стабилен и с reverse=True
        entries.sort(key=lambda entry: entry.total_xp, reverse=True)
        for rank, entry in enumerate(entries, start=1):
            entry.rank = rank

        return entries[:limit]
