# grammatik/core/config.py
from pydantic_settings import BaseSettings
from pydantic import BaseModel, Field, SecretStr
from typing import Dict, List
from functools import lru_cache


class DataBaseConfig(BaseModel):
    DB_HOST: str = Field("localhost", description="Database host")
    DB_PORT: int = Field(5432, description="Database port")
    DB_NAME: str = Field("spanskgrammatik", description="Database name")
    DB_USER: str = Field("postgres", description="Database user")
    DB_PASSWORD: SecretStr = Field(SecretStr("postgres"), description="Database password")  # SecretStr скрывает значение в логах
    DB_ECHO: bool = Field(False, description="Enable SQL echo")
    DB_POOL_SIZE: int = Field(5, description="Database pool size")
    DB_MAX_OVERFLOW: int = Field(10, description="Database max overflow")

    @property
    def DATABASE_URL(self) -> str:
        return f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD.get_secret_value()}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    naming_convention: dict[str, str] = {
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_N_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }


class SecurityConfig(BaseModel):
    # Токены выпускает внешний auth-провайдер, мы их только проверяем
    JWT_SECRET_KEY: SecretStr = Field(SecretStr("dev-secret-change-me"), description="JWT secret shared with the auth provider")
    JWT_ALGORITHM: str = Field("HS256", description="JWT algorithm")
    JWT_AUDIENCE: str = Field("authenticated", description="Expected JWT audience")


class AdminConfig(BaseModel):
    ADMIN_EMAILS: str = Field("", description="Comma separated emails with admin access")

    @property
    def admin_emails(self) -> List[str]:
        return [email.strip().lower() for email in self.ADMIN_EMAILS.split(",") if email.strip()]


class RateLimitRule(BaseModel):
    window_seconds: int = Field(..., gt=0)
    max_requests: int = Field(..., gt=0)


class RateLimitConfig(BaseModel):
    operations: Dict[str, RateLimitRule] = Field(
        default_factory=lambda: {
            "exercise_generation": RateLimitRule(window_seconds=60 * 60, max_requests=50),
            "ai_requests": RateLimitRule(window_seconds=60, max_requests=10),
            "bulk_operations": RateLimitRule(window_seconds=10 * 60, max_requests=5),
            "admin_operations": RateLimitRule(window_seconds=60, max_requests=100),
        },
        description="Fixed-window limits per operation"
    )


class RewardsConfig(BaseModel):
    TIMEZONE: str = Field("Europe/Copenhagen", description="Timezone for calendar-day streak bucketing")
    LEADERBOARD_CONCURRENCY: int = Field(10, ge=1, description="Max concurrent per-user stats fetches")
    LEADERBOARD_DEFAULT_LIMIT: int = Field(10, ge=1)
    LEADERBOARD_MAX_LIMIT: int = Field(100, ge=1)


class Settings(BaseSettings):
    app_name: str = Field("Spansk Grammatik", description="Application name")
    debug: bool = Field(False, description="Debug mode")
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
        ],
        description="CORS origins"
    )

    db: DataBaseConfig = Field(default_factory=DataBaseConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    admin: AdminConfig = Field(default_factory=AdminConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    rewards: RewardsConfig = Field(default_factory=RewardsConfig)

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        case_sensitive = False
        env_nested_delimiter = '__'  # Для вложенных объектов
        extra = "ignore"

@lru_cache()
def get_settings() -> Settings:
    """Кэшированный экземпляр настроек"""
    return Settings()

settings = get_settings()
