"""
Puff Backend: Database Helper Tests
===================================

What we test:
    ✅ wait_for_database retries connection errors, then gives up
    ✅ init_models creates every table
    ✅ Configuration checks for production secrets
"""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import inspect

from puff.config import DEFAULT_JWT_SECRET, Settings, settings
from puff.database import init_models, wait_for_database


class _FlakyEngine:
    """connect() fails `failures` times, then hands out the real engine's connection."""

    def __init__(self, real_engine, failures: int):
        self.real_engine = real_engine
        self.failures = failures
        self.attempts = 0

    def connect(self):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise OSError("connection refused")
        return self.real_engine.connect()


class TestWaitForDatabase:

    @pytest.mark.asyncio
    async def test_succeeds_after_retries(self, db_engine):
        flaky = _FlakyEngine(db_engine, failures=2)
        with patch.object(settings, "retry_min_wait", 0), patch.object(settings, "retry_max_wait", 1), \
             patch("puff.database.wait_exponential_jitter", return_value=MagicMock(return_value=0)):
            await wait_for_database(flaky)
        assert flaky.attempts == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self, db_engine):
        flaky = _FlakyEngine(db_engine, failures=100)
        with patch.object(settings, "retry_max_attempts", 3), \
             patch("puff.database.wait_exponential_jitter", return_value=MagicMock(return_value=0)):
            with pytest.raises(OSError):
                await wait_for_database(flaky)
        assert flaky.attempts == 3


class TestInitModels:

    @pytest.mark.asyncio
    async def test_creates_all_tables(self, db_engine):
        await init_models(db_engine)  # idempotent
        async with db_engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        assert set(tables) >= {"users", "strains", "sessions", "symptom_logs", "tolerance_breaks"}


class TestProductionSettings:

    def test_default_secret_rejected(self):
        config = Settings(jwt_secret_key=DEFAULT_JWT_SECRET)
        with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
            config.validate_required_for_production()

    def test_short_secret_rejected(self):
        config = Settings(jwt_secret_key="short")
        with pytest.raises(ValueError, match="32 characters"):
            config.validate_required_for_production()

    def test_strong_secret_accepted(self):
        Settings(jwt_secret_key="x" * 48).validate_required_for_production()

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValueError):
            Settings(log_level="chatty")

    def test_cors_origins_list(self):
        config = Settings(cors_origins="http://a.test, http://b.test,")
        assert config.cors_origins_list == ["http://a.test", "http://b.test"]
