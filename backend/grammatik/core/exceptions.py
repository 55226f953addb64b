# grammatik/core/exceptions.py
from typing import Optional
from fastapi import status

class AppException(Exception):
    """Базовое исключение для приложения"""
    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail

class AuthenticationError(AppException):
    """Ошибка аутентификации"""
    def __init__(self, detail: str = "Authentication failed"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail)

class AuthorizationError(AppException):
    """Ошибка авторизации"""
    def __init__(self, detail: str = "Not authorized"):
        super().__init__(status.HTTP_403_FORBIDDEN, detail)

class NotFoundError(AppException):
    """Ресурс не найден"""
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status.HTTP_404_NOT_FOUND, detail)

class RateLimitError(AppException):
    """Ошибка превышения лимита запросов"""
    def __init__(self, detail: str = "Too many requests", retry_after: Optional[int] = None):
        super().__init__(status.HTTP_429_TOO_MANY_REQUESTS, detail)
        self.retry_after = retry_after

class StatsUnavailableError(AppException):
    """Статистику не удалось посчитать (ошибка чтения прогресса)"""
    def __init__(self, detail: str = "Failed to calculate rewards"):
        super().__init__(status.HTTP_503_SERVICE_UNAVAILABLE, detail)
