# grammatik/api/v1/routes/rewards.py
from fastapi import APIRouter, Depends, Query
import logging

from grammatik.api.v1.dependencies import get_rewards_calculator
from grammatik.core.config import settings
from grammatik.core.exceptions import StatsUnavailableError
from grammatik.core.schemas.auth import CurrentUser
from grammatik.core.schemas.rewards import (
    LeaderboardEntry,
    LeaderboardItem,
    LeaderboardResponse,
    RewardsResponse,
    UserStats,
)
from grammatik.core.security import get_current_user
from grammatik.services.rewards import generate_achievements, get_medal_display
from grammatik.services.rewards_calculator import RewardsCalculator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rewards", tags=["rewards"])


def build_rewards_response(user_id: str, stats: UserStats) -> RewardsResponse:
    """Плоский ответ для дашборда"""
    return RewardsResponse(
        user_id=user_id,
        medal_type=stats.current_medal,
        total_xp=stats.total_xp,
        current_streak=stats.current_streak,
        longest_streak=stats.longest_streak,
        questions_answered=stats.questions_answered,
        correct_answers=stats.correct_answers,
        accuracy_percentage=stats.accuracy_percentage,
        achievements=generate_achievements(stats),
        medal_display=get_medal_display(stats.current_medal),
        stats=stats,
    )


def to_leaderboard_item(entry: LeaderboardEntry) -> LeaderboardItem:
    return LeaderboardItem(
        rank=entry.rank,
        user_id=entry.user_id,
        user_email=entry.email,
        display_name=entry.display_name,
        medal_type=entry.current_medal,
        total_xp=entry.total_xp,
        current_streak=entry.current_streak,
        longest_streak=entry.longest_streak,
        questions_answered=entry.questions_answered,
        accuracy_percentage=entry.accuracy_percentage,
        achievements_count=entry.achievements_count,
        streak_count=entry.current_streak,
    )


@router.get("", response_model=RewardsResponse)
async def get_my_rewards(
    current_user: CurrentUser = Depends(get_current_user),
    calculator: RewardsCalculator = Depends(get_rewards_calculator),
):
    """Награды и статистика текущего пользователя"""
    stats = await calculator.calculate_user_stats(current_user.id)
    if stats is None:
        logger.error(f"Failed to calculate user stats for user: {current_user.id}")
        raise StatsUnavailableError()
    return build_rewards_response(current_user.id, stats)


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    limit: int = Query(
        settings.rewards.LEADERBOARD_DEFAULT_LIMIT,
        ge=1,
        le=settings.rewards.LEADERBOARD_MAX_LIMIT,
        description="Сколько позиций вернуть",
    ),
    calculator: RewardsCalculator = Depends(get_rewards_calculator),
):
    """Лидерборд по XP"""
    entries = await calculator.calculate_leaderboard(limit)
    items = [to_leaderboard_item(entry) for entry in entries]
    return LeaderboardResponse(leaderboard=items, total_entries=len(items))
