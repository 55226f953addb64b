#!/usr/bin/env python3
"""
Rate limit service tests against a mocked counter repository
"""

import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from grammatik.core.config import RateLimitConfig, RateLimitRule
from grammatik.services.rate_limiter import UNKNOWN_OPERATION_LIMIT, RateLimitService

NOW = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


class TestRateLimitService(unittest.IsolatedAsyncioTestCase):
    """Test fixed-window decisions and admin resets"""

    def setUp(self):
        self.repository = AsyncMock()
        self.rules = {
            "ai_requests": RateLimitRule(window_seconds=60, max_requests=10),
            "bulk_operations": RateLimitRule(window_seconds=600, max_requests=5),
        }
        self.service = RateLimitService(self.repository, self.rules, clock=lambda: NOW)

    async def test_allowed_request(self):
        """Test counter inside the limit"""
        self.repository.hit.return_value = SimpleNamespace(count=3, reset_at=NOW + timedelta(seconds=40))

        result = await self.service.check("user-1", "ai_requests")

        self.assertTrue(result.allowed)
        self.assertEqual(result.limit, 10)
        self.assertEqual(result.remaining, 7)
        self.assertIsNone(result.retry_after)
        self.repository.hit.assert_awaited_once_with(
            "user-1:ai_requests",
            max_requests=10,
            window=timedelta(seconds=60),
            now=NOW,
        )

    async def test_blocked_request(self):
        """Test exhausted window reports retry_after"""
        reset_at = NOW + timedelta(seconds=12, milliseconds=300)
        self.repository.hit.return_value = None
        self.repository.get.return_value = SimpleNamespace(count=10, reset_at=reset_at)

        result = await self.service.check("user-1", "ai_requests")

        self.assertFalse(result.allowed)
        self.assertEqual(result.remaining, 0)
        self.assertEqual(result.reset_at, reset_at)
        self.assertEqual(result.retry_after, 13)

    async def test_unknown_operation_is_not_limited(self):
        """Test operations without a rule skip the store"""
        result = await self.service.check("user-1", "made_up")

        self.assertTrue(result.allowed)
        self.assertEqual(result.limit, UNKNOWN_OPERATION_LIMIT)
        self.repository.hit.assert_not_awaited()

    async def test_status_without_counter(self):
        """Test status for a user with no window yet"""
        self.repository.get.return_value = None

        result = await self.service.status("user-1", "bulk_operations")

        self.assertTrue(result.allowed)
        self.assertEqual(result.remaining, 5)
        self.repository.hit.assert_not_awaited()

    async def test_status_with_expired_counter(self):
        """Test an expired window reads as a fresh one"""
        self.repository.get.return_value = SimpleNamespace(count=5, reset_at=NOW - timedelta(seconds=1))

        result = await self.service.status("user-1", "bulk_operations")

        self.assertTrue(result.allowed)
        self.assertEqual(result.remaining, 5)

    async def test_status_exhausted(self):
        """Test status of an exhausted active window"""
        self.repository.get.return_value = SimpleNamespace(count=5, reset_at=NOW + timedelta(seconds=90))

        result = await self.service.status("user-1", "bulk_operations")

        self.assertFalse(result.allowed)
        self.assertEqual(result.retry_after, 90)

    async def test_status_all(self):
        self.repository.get.return_value = None
        overview = await self.service.status_all("user-1")
        self.assertEqual(set(overview), {"ai_requests", "bulk_operations"})

    async def test_reset_single_operation(self):
        message = await self.service.reset("user-1", "ai_requests")
        self.repository.delete.assert_awaited_once_with("user-1:ai_requests")
        self.assertEqual(message, "Rate limit reset for ai_requests")

    async def test_reset_all_operations(self):
        self.repository.delete_by_prefix.return_value = 2
        message = await self.service.reset("user-1")
        self.repository.delete_by_prefix.assert_awaited_once_with("user-1:")
        self.assertEqual(message, "All rate limits reset (2 operations)")

    async def test_cleanup_expired(self):
        self.repository.delete_expired.return_value = 4
        self.assertEqual(await self.service.cleanup_expired(), 4)
        self.repository.delete_expired.assert_awaited_once_with(NOW)


class TestRateLimitConfig(unittest.TestCase):
    def test_default_rules(self):
        """Test built-in operation limits"""
        operations = RateLimitConfig().operations
        self.assertEqual(operations["exercise_generation"], RateLimitRule(window_seconds=3600, max_requests=50))
        self.assertEqual(operations["ai_requests"], RateLimitRule(window_seconds=60, max_requests=10))
        self.assertEqual(operations["bulk_operations"], RateLimitRule(window_seconds=600, max_requests=5))
        self.assertEqual(operations["admin_operations"], RateLimitRule(window_seconds=60, max_requests=100))


if __name__ == '__main__':
    unittest.main()
