# main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from datetime import datetime, timezone
from contextlib import asynccontextmanager
import logging
from grammatik.api.v1.routes import api_router
from grammatik.core.config import settings
from grammatik.core.database import db_helper
from grammatik.core.exceptions import AppException, RateLimitError
from grammatik.services.permissions import AdminPolicy

# Настройка логирования
logging.basicConfig(
    level=logging.INFO if settings.debug else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Контекстный менеджер для жизненного цикла приложения"""
    # Startup
    logger.info(f"🚀 Starting {settings.app_name} in {'DEBUG' if settings.debug else 'PRODUCTION'} mode")

    logger.info(f"📝 Database: {db_helper.masked_url}")
    logger.info(f"🕒 Streak timezone: {settings.rewards.TIMEZONE}")

    # Список админов читается один раз и дальше передается по ссылке
    app.state.admin_policy = AdminPolicy(settings.admin.admin_emails)
    if not app.state.admin_policy.admin_emails:
        logger.warning("ADMIN_EMAILS is empty, only database roles grant admin access")

    # Проверка подключения к базе данных при старте
    try:
        await db_helper.ping()
        logger.info("✅ Database connection successful")
    except Exception as e:
        logger.error(f"❌ Database connection failed: {e}")
        raise

    yield

    # Shutdown
    await db_helper.dispose()
    logger.info("👋 Application shutdown complete")

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# Настройка CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Подключение роутеров
app.include_router(api_router, prefix="/api/v1")

@app.get("/", summary="Root endpoint", tags=["root"])
async def root():
    """Корневой эндпоинт API"""
    return {
        "message": f"Welcome to {settings.app_name} API",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        } if settings.debug else None,
        "environment": "development" if settings.debug else "production",
        "timestamp": utcnow_iso()
    }

@app.get("/health", summary="Health check", tags=["health"])
async def health_check():
    """Проверка здоровья приложения"""
    try:
        db_value = await db_helper.ping()

        return {
            "status": "healthy",
            "timestamp": utcnow_iso(),
            "environment": "development" if settings.debug else "production",
            "database": "connected",
            "database_ping": db_value,
            "app_name": settings.app_name,
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return {
            "status": "unhealthy",
            "timestamp": utcnow_iso(),
            "database": "connection failed",
            "error": str(e) if settings.debug else "Database connection error"
        }

# Глобальный обработчик исключений
@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """Глобальный обработчик кастомных исключений"""
    logger.error(f"AppException: {exc.detail} (type: {type(exc).__name__})")

    headers = None
    if isinstance(exc, RateLimitError) and exc.retry_after is not None:
        headers = {"Retry-After": str(exc.retry_after)}

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "error": type(exc).__name__,
            "timestamp": utcnow_iso()
        },
        headers=headers,
    )

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Глобальный обработчик всех исключений"""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error": "InternalServerError",
            "timestamp": utcnow_iso(),
            "debug_info": str(exc) if settings.debug else None
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level="info" if settings.debug else "warning",
        access_log=False  # Логи доступа лучше настраивать через Nginx или подобное
    )
