"""
Process-wide engine and session factory.

Built once from ``DATABASE_URL`` at import time and shared by every request.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from bornfidis_provisions.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

engine = create_engine(settings.database.url)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """
    Create missing tables on startup.

    The Alembic migrations under ``alembic/versions`` own the production
    schema, so against a migrated database this only confirms connectivity.
    """
    await create_all(engine)
