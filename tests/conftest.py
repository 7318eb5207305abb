"""Shared fixtures: an in-memory SQLite database with the full schema."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from motorquote.config import DatabaseSettings
from motorquote.db.engine import build_engine, build_session_factory, init_db


@pytest_asyncio.fixture()
async def sqlite_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = build_engine(DatabaseSettings(database_url="sqlite+aiosqlite:///:memory:"))
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(sqlite_engine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(sqlite_engine)


@pytest_asyncio.fixture()
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A real AsyncSession on a fresh in-memory database."""
    async with session_factory() as session:
        yield session
