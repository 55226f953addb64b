# grammatik/models/system.py
from sqlalchemy import Column, Integer, String, DateTime
from .base import Base

class RateLimitCounter(Base):
    """Окно rate limit, общее для всех инстансов приложения"""
    __tablename__ = "rate_limit_counters"

    key = Column(String, primary_key=True) # "<user_id>:<operation>"
    count = Column(Integer, nullable=False, default=0)
    reset_at = Column(DateTime(timezone=True), nullable=False, index=True)
