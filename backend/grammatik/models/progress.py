# grammatik/models/progress.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from .base import Base

class UserProgress(Base):
    """Результат пользователя по одному упражнению (последняя попытка)"""
    __tablename__ = "user_progress"
    __table_args__ = (UniqueConstraint("user_id", "exercise_id"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Integer, nullable=False)

    completed = Column(Boolean, default=False)
    score = Column(Integer, nullable=True) # 0-100%
    attempts = Column(Integer, default=0)

    # Новый формат: список [{question_id, correct, ...}], старый: один объект
    question_results = Column(JSONB, nullable=True)

    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="progress")
