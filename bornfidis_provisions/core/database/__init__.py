"""
Database layer for Bornfidis Provisions.

- entities/: SQLModel tables (bookings, chefs, farmers, ingredients,
  assignments, payouts, invites, impact, community content)
- repositories/: async data access, one repository per aggregate
- session.py: the process-wide engine, session factory and FastAPI dependency
- utils.py: engine, session factory and table creation helpers
"""

from .base import Base, new_id, utc_now
from .session import (
    async_session_maker,
    engine,
    get_session,
    init_db,
)
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
    normalize_database_url,
)

__all__ = [
    "Base",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "get_session",
    "init_db",
    "new_id",
    "normalize_database_url",
    "utc_now",
]
