# grammatik/models/user.py
from sqlalchemy import Column, String, DateTime, func
from sqlalchemy.orm import relationship
import enum
from .base import Base

class UserRole(str, enum.Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"

class SpanishLevel(str, enum.Enum):
    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"
    C2 = "C2"

class User(Base):
    """Профиль пользователя. id совпадает с id во внешнем auth-провайдере"""
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)
    role = Column(String, default=UserRole.STUDENT.value)
    current_level = Column(String, default=SpanishLevel.A1.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    progress = relationship("UserProgress", back_populates="user")

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
