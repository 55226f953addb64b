# grammatik/services/rewards.py
"""
Чистые функции системы наград: XP, медали, достижения.
Ничего не читают из БД, поэтому результат зависит только от входных данных.
"""
from datetime import datetime, timezone
from typing import Dict, List, NamedTuple, Optional
import logging

from grammatik.core.schemas.rewards import (
    Achievement,
    AchievementType,
    MedalDisplay,
    MedalType,
    UserStats,
)

logger = logging.getLogger(__name__)

XP_PER_CORRECT_ANSWER = 10
XP_PER_PERFECT_SCORE = 50


class MedalRequirement(NamedTuple):
    xp: int
    correct_answers: int
    accuracy: int


MEDAL_REQUIREMENTS: Dict[MedalType, MedalRequirement] = {
    MedalType.BRONZE: MedalRequirement(xp=50, correct_answers=10, accuracy=60),
    MedalType.SILVER: MedalRequirement(xp=250, correct_answers=50, accuracy=70),
    MedalType.GOLD: MedalRequirement(xp=750, correct_answers=100, accuracy=80),
    MedalType.DIAMOND: MedalRequirement(xp=2500, correct_answers=250, accuracy=85),
    MedalType.EMERALD: MedalRequirement(xp=5000, correct_answers=500, accuracy=90),
}

# По возрастанию; NONE стоит ниже всех и требований не имеет
MEDAL_ORDER: List[MedalType] = [
    MedalType.NONE,
    MedalType.BRONZE,
    MedalType.SILVER,
    MedalType.GOLD,
    MedalType.DIAMOND,
    MedalType.EMERALD,
]


def calculate_xp(correct_answers: int, perfect_scores: int = 0) -> int:
    """10 XP за правильный ответ плюс 50 XP за упражнение на 100%"""
    return correct_answers * XP_PER_CORRECT_ANSWER + perfect_scores * XP_PER_PERFECT_SCORE


def meets_requirement(stats: UserStats, requirement: MedalRequirement) -> bool:
    return (
        stats.total_xp >= requirement.xp
        and stats.correct_answers >= requirement.correct_answers
        and stats.accuracy_percentage >= requirement.accuracy
    )


def get_current_medal(stats: UserStats) -> MedalType:
    """
    Самая высокая медаль, все три требования которой выполнены.
    Проверка идет сверху вниз, поэтому промежуточные медали можно "перепрыгнуть".
    """
    for medal in reversed(MEDAL_ORDER[1:]):
        if meets_requirement(stats, MEDAL_REQUIREMENTS[medal]):
            logger.debug(f"Medal {medal.value} qualified: xp={stats.total_xp}, "
                         f"correct={stats.correct_answers}, accuracy={stats.accuracy_percentage}")
            return medal
    return MedalType.NONE


def get_next_medal(medal: MedalType) -> Optional[MedalType]:
    """Следующая медаль по порядку или None для изумрудной"""
    index = MEDAL_ORDER.index(medal)
    if index == len(MEDAL_ORDER) - 1:
        return None
    return MEDAL_ORDER[index + 1]


def _component_progress(value: int, required: int) -> int:
    return min(100, value * 100 // required)


def calculate_progress_to_next_medal(stats: UserStats, next_medal: Optional[MedalType]) -> int:
    """Прогресс к следующей медали в процентах, по самому отстающему требованию"""
    if next_medal is None:
        return 100

    requirement = MEDAL_REQUIREMENTS[next_medal]
    return min(
        _component_progress(stats.total_xp, requirement.xp),
        _component_progress(stats.correct_answers, requirement.correct_answers),
        _component_progress(stats.accuracy_percentage, requirement.accuracy),
    )


def generate_achievements(stats: UserStats, now: Optional[datetime] = None) -> List[Achievement]:
    """
    Пересчитывает полный набор достижений по текущей статистике.
    Правила независимы друг от друга: "Month Master" выдается вместе с "Week Warrior".
    """
    earned_at = now or datetime.now(timezone.utc)
    achievements: List[Achievement] = []

    if stats.current_streak >= 7:
        achievements.append(Achievement(
            id="week_streak",
            name="Week Warrior",
            description="Maintained a 7-day streak",
            icon="🔥",
            earned_at=earned_at,
            type=AchievementType.STREAK,
        ))

    if stats.current_streak >= 30:
        achievements.append(Achievement(
            id="month_streak",
            name="Month Master",
            description="Maintained a 30-day streak",
            icon="🏆",
            earned_at=earned_at,
            type=AchievementType.STREAK,
        ))

    if stats.accuracy_percentage >= 95 and stats.questions_answered >= 100:
        achievements.append(Achievement(
            id="perfectionist",
            name="Perfectionist",
            description="95%+ accuracy with 100+ questions",
            icon="💎",
            earned_at=earned_at,
            type=AchievementType.ACCURACY,
        ))

    if stats.questions_answered >= 1000:
        achievements.append(Achievement(
            id="thousand_questions",
            name="Question Master",
            description="Answered 1000+ questions",
            icon="🧠",
            earned_at=earned_at,
            type=AchievementType.QUESTIONS,
        ))

    return achievements


MEDAL_DISPLAYS: Dict[MedalType, MedalDisplay] = {
    MedalType.NONE: MedalDisplay(emoji="⚪", name="Ingen Medalje", color="gray"),
    MedalType.BRONZE: MedalDisplay(emoji="🥉", name="Bronze", color="amber"),
    MedalType.SILVER: MedalDisplay(emoji="🥈", name="Silver", color="gray"),
    MedalType.GOLD: MedalDisplay(emoji="🥇", name="Gold", color="yellow"),
    MedalType.DIAMOND: MedalDisplay(emoji="💎", name="Diamond", color="blue"),
    MedalType.EMERALD: MedalDisplay(emoji="💚", name="Emerald", color="green"),
}


def get_medal_display(medal) -> MedalDisplay:
    """Параметры отображения медали; неизвестное значение показывается как 'нет медали'"""
    try:
        return MEDAL_DISPLAYS[MedalType(medal)]
    except ValueError:
        return MEDAL_DISPLAYS[MedalType.NONE]
