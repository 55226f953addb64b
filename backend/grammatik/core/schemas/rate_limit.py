# grammatik/core/schemas/rate_limit.py
from pydantic import BaseModel
from typing import Dict, Optional
from datetime import datetime


class RateLimitResult(BaseModel):
    allowed: bool
    limit: int
    remaining: int
    reset_at: datetime
    retry_after: Optional[int] = None # секунды до конца окна, если запрос заблокирован


class RateLimitOverview(BaseModel):
    user_id: str
    operations: Dict[str, RateLimitResult]


class RateLimitResetResponse(BaseModel):
    success: bool = True
    message: str


class RateLimitCleanupResponse(BaseModel):
    cleaned: int
