# grammatik/core/database.py
from typing import AsyncGenerator, Optional
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker, AsyncSession
from grammatik.core.config import DataBaseConfig, settings


class DatabaseHelper:
    """Один engine на процесс; сессии короткие, по одной на запрос или расчет"""

    def __init__(self, config: DataBaseConfig):
        self.config = config
        self.engine: AsyncEngine = create_async_engine(
            url=config.DATABASE_URL,
            echo=config.DB_ECHO,
            pool_size=config.DB_POOL_SIZE,
            max_overflow=config.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
        )
        # Лидерборд читает данные пачкой сессий параллельно, коммиты только в rate limit
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )

    @property
    def masked_url(self) -> str:
        """URL для логов без пароля"""
        return self.config.DATABASE_URL.replace(self.config.DB_PASSWORD.get_secret_value(), "***")

    async def ping(self) -> Optional[int]:
        """SELECT 1; исключение пробрасывается вызывающему"""
        async with self.session_factory() as session:
            result = await session.execute(text("SELECT 1"))
            return result.scalar()

    async def dispose(self):
        await self.engine.dispose()

    async def session_getter(self) -> AsyncGenerator[AsyncSession, None]:
        """Сессия БД для FastAPI зависимостей"""
        async with self.session_factory() as session:
            yield session


db_helper = DatabaseHelper(settings.db)
