"""
Puff Backend: Database Session Management
=========================================

What:  Async SQLAlchemy engine, session factory, FastAPI dependency, and
       startup helpers (readiness wait, optional table creation).
How:   Creates an async engine with connection pooling and provides a session
       dependency that commits on success and rolls back on error.
Who:   Route handlers via FastAPI's dependency injection; the app lifespan.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling Strategy (server databases):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    SQLite URLs skip the pool arguments: aiosqlite runs on a single file and
    the SQLite pools reject pool_size/max_overflow.
"""

import logging
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from puff.config import settings

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    """Engine keyword arguments for the configured database backend."""
    options: Dict[str, Any] = {
        # SQL echo is only useful while developing
        "echo": settings.log_level == "DEBUG",
    }
    if settings.is_sqlite:
        options["connect_args"] = {"check_same_thread": False}
        return options

    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
    )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after commit, which the
# response builders rely on once get_db_session has committed.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers with this metadata, which Alembic reads for
    migrations and init_models() uses to create tables.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction and re-raises
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/strains")
        async def list_strains(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            # Any failure, DB or not, must leave no partial writes behind
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def wait_for_database(target: Optional[AsyncEngine] = None) -> None:
    """
    Block until the database answers `SELECT 1`.

    What:  Startup readiness check with exponential backoff and jitter.
    When:  Called once from the lifespan handler before serving traffic.
    How:   tenacity retries connection failures up to retry_max_attempts and
           re-raises the last error when the budget is exhausted.
    """
    db_engine = target or engine
    retrying = AsyncRetrying(
        retry=retry_if_exception_type((OSError, DBAPIError)),
        stop=stop_after_attempt(settings.retry_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.retry_min_wait,
            max=settings.retry_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            async with db_engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
    logger.info("Database is reachable")


async def init_models(target: Optional[AsyncEngine] = None) -> None:
    """
    Create all tables that don't exist yet.

    Used by tests and by development setups with DB_AUTO_CREATE_TABLES=true.
    Production schemas are managed by Alembic.
    """
    # Registers every model with Base.metadata
    import puff.models  # noqa: F401

    db_engine = target or engine
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
