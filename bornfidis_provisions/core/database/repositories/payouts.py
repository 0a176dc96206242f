"""
Chef payout ledger repository.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.payouts import ChefPayout
from .base import SqlModelRepository


class ChefPayoutRepository(SqlModelRepository[ChefPayout]):
    """Repository for the chef payout ledger (one row per booking)."""

    default_order = "created_at"
    default_descending = True

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ChefPayout)

    async def get_by_booking(self, booking_id: str) -> Optional[ChefPayout]:
        return await self._first(select(ChefPayout).where(ChefPayout.booking_id == booking_id))
