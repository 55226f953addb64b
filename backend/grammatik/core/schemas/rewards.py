# grammatik/core/schemas/rewards.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Any
from datetime import datetime
import enum


class MedalType(str, enum.Enum):
    NONE = "none"
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    DIAMOND = "diamond"
    EMERALD = "emerald"


class AchievementType(str, enum.Enum):
    STREAK = "streak"
    ACCURACY = "accuracy"
    QUESTIONS = "questions"
    PERFECT_SCORE = "perfect_score"
    LEVEL_MASTER = "level_master"


# --- Входные данные: строка user_progress ---

class CompletionRecord(BaseModel):
    user_id: str
    exercise_id: int
    score: Optional[int] = None
    completed: bool = False
    attempts: int = 0
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    question_results: Any = None # список, одиночный объект (legacy) или None

    model_config = ConfigDict(from_attributes=True)


# --- Производные значения, всегда пересчитываются из записей ---

class UserStats(BaseModel):
    total_xp: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    questions_answered: int = 0
    correct_answers: int = 0
    accuracy_percentage: int = 0
    current_medal: MedalType = MedalType.NONE
    next_medal: Optional[MedalType] = None
    progress_to_next: int = 0


class Achievement(BaseModel):
    id: str
    name: str
    description: str
    icon: str
    earned_at: datetime
    type: AchievementType


class LeaderboardEntry(UserStats):
    user_id: str
    email: Optional[str] = None
    display_name: str
    achievements_count: int = 0
    rank: int = 0


class MedalDisplay(BaseModel):
    emoji: str
    name: str
    color: str


# --- Ответы API ---

class RewardsResponse(BaseModel):
    success: bool = True
    user_id: str
    medal_type: MedalType
    total_xp: int
    current_streak: int
    longest_streak: int
    questions_answered: int
    correct_answers: int
    accuracy_percentage: int
    achievements: List[Achievement] = []
    medal_display: MedalDisplay
    stats: UserStats


class LeaderboardItem(BaseModel):
    rank: int
    user_id: str
    user_email: Optional[str] = None
    display_name: str
    medal_type: MedalType
    total_xp: int
    current_streak: int
    longest_streak: int
    questions_answered: int
    accuracy_percentage: int
    achievements_count: int
    streak_count: int


class LeaderboardResponse(BaseModel):
    success: bool = True
    leaderboard: List[LeaderboardItem] = []
    total_entries: int = Field(0, description="Number of returned entries")
