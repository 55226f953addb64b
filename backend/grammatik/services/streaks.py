# grammatik/services/streaks.py
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Iterable, List, NamedTuple, Optional

from grammatik.core.schemas.rewards import CompletionRecord


class StreakResult(NamedTuple):
    current_streak: int
    longest_streak: int


def _practice_date(record: CompletionRecord, tz: tzinfo) -> Optional[date]:
    """Календарный день записи в часовом поясе приложения"""
    moment = record.created_at or record.completed_at
    if moment is None:
        return None
    if moment.tzinfo is None:
        # timestamptz из БД всегда aware; naive считаем UTC
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz).date()


def practice_dates(records: Iterable[CompletionRecord], tz: tzinfo) -> List[date]:
    """Уникальные дни практики по возрастанию"""
    dates = {_practice_date(record, tz) for record in records}
    dates.discard(None)
    return sorted(dates)


def calculate_streak(
    records: Iterable[CompletionRecord],
    today: Optional[date] = None,
    tz: tzinfo = timezone.utc,
) -> StreakResult:
    """
    Текущая и максимальная серия дней подряд с практикой.

    Текущая серия считается активной, только если последний день практики
    сегодня или вчера; иначе она равна 0.
    """
    dates = practice_dates(records, tz)
    if not dates:
        return StreakResult(current_streak=0, longest_streak=0)

    one_day = timedelta(days=1)

    longest_streak = 1
    running = 1
    for previous, current in zip(dates, dates[1:]):
        if current - previous == one_day:
            running += 1
        else:
            running = 1
        longest_streak = max(longest_streak, running)

    if today is None:
        today = datetime.now(tz).date()

    most_recent = dates[-1]
    if most_recent not in (today, today - one_day):
        return StreakResult(current_streak=0, longest_streak=longest_streak)

    current_streak = 1
    for index in range(len(dates) - 1, 0, -1):
        if dates[index] - dates[index - 1] == one_day:
            current_streak += 1
        else:
            break

    return StreakResult(current_streak=current_streak, longest_streak=longest_streak)
