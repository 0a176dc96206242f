"""
Engine and session factory helpers.

Production runs on Postgres through asyncpg; the test suite and local
experiments run on SQLite through aiosqlite. Both are built here.
"""

from __future__ import annotations

import re
from typing import Any, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

_POSTGRES_SCHEME = re.compile(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://")


def normalize_database_url(db_url: str) -> str:
    """Force the asyncpg driver on any Postgres URL.

    Hosting providers hand out ``postgres://`` or ``postgresql://`` URLs;
    both are rewritten to ``postgresql+asyncpg://``. Anything else is returned
    unchanged.
    """
    return _POSTGRES_SCHEME.sub("postgresql+asyncpg://", db_url, count=1)


def create_engine(db_url: str) -> AsyncEngine:
    url = normalize_database_url(db_url)
    options: Dict[str, Any] = {}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_pre_ping"] = True
    return create_async_engine(url, **options)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Services read attributes after commit, so instances must stay loaded.
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create every marketplace table that does not exist yet."""
    from . import entities  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
