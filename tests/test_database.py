#!/usr/bin/env python3
"""
Database helper tests (no live database)
"""

import unittest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from pydantic import SecretStr

from grammatik.core.config import DataBaseConfig
from grammatik.core.database import DatabaseHelper


class TestDatabaseHelper(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.helper = DatabaseHelper(DataBaseConfig(DB_PASSWORD=SecretStr("s3cret"), DB_HOST="db"))

    async def asyncTearDown(self):
        await self.helper.dispose()

    def test_masked_url(self):
        """Test the password never reaches the logged URL"""
        self.assertNotIn("s3cret", self.helper.masked_url)
        self.assertEqual(self.helper.masked_url, "postgresql+asyncpg://postgres:***@db:5432/spanskgrammatik")

    async def test_ping(self):
        """Test ping runs SELECT 1 in a short session"""
        session = MagicMock()
        session.execute = AsyncMock(return_value=MagicMock(scalar=MagicMock(return_value=1)))
        factory = MagicMock()
        factory.return_value.__aenter__.return_value = session
        factory.return_value.__aexit__.return_value = False
        self.helper.session_factory = factory

        self.assertEqual(await self.helper.ping(), 1)
        session.execute.assert_awaited_once()
        self.assertEqual(str(session.execute.await_args.args[0]), "SELECT 1")

    async def test_ping_propagates_errors(self):
        session = MagicMock()
        session.execute = AsyncMock(side_effect=OSError("connection refused"))
        factory = MagicMock()
        factory.return_value.__aenter__.return_value = session
        factory.return_value.__aexit__.return_value = False
        self.helper.session_factory = factory

        with self.assertRaises(OSError):
            await self.helper.ping()


if __name__ == '__main__':
    unittest.main()
