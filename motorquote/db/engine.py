"""Async database engine and session factory.

PostgreSQL (asyncpg) in deployment. SQLite (aiosqlite) URLs are accepted for
local runs and the test suite; an in-memory SQLite database is pinned to a
single connection so every session sees the same tables.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from motorquote.config import DatabaseSettings, settings
from motorquote.models import Base

logger = logging.getLogger(__name__)


def build_engine(db: DatabaseSettings | None = None, echo: bool = False) -> AsyncEngine:
    """Create an AsyncEngine with pool options suited to the backend."""
    db = db or settings.db
    options: dict[str, Any] = {"echo": echo}

    if db.database_url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if ":memory:" in db.database_url:
            options["poolclass"] = StaticPool
    else:
        options.update(
            pool_size=db.pool_size,
            max_overflow=db.max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )

    return create_async_engine(db.database_url, **options)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Committed quotations are read back (ids, quote numbers) after commit
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine: AsyncEngine = build_engine(echo=settings.log_level == "DEBUG")
async_session_factory = build_session_factory(engine)


# ── Lifespan helpers ─────────────────────────────────────────────────


async def init_db(bind: AsyncEngine | None = None) -> None:
    """Create missing tables outside production; production schema comes from Alembic."""
    if settings.is_production:
        logger.info("Production environment: schema managed by Alembic")
        return

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured: %s", ", ".join(sorted(Base.metadata.tables)))


@contextlib.asynccontextmanager
async def db_lifespan(bind: AsyncEngine | None = None) -> AsyncGenerator[None, None]:
    """Initialise the schema on enter, dispose the connection pool on exit."""
    bind = bind or engine
    await init_db(bind)
    try:
        yield
    finally:
        await bind.dispose()
