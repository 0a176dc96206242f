"""
Chefs repository.

Data access for chefs, chef applications, per-day availability and chef
ingredient needs.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.chefs import Chef, ChefApplication, ChefAvailability, ChefNeed
from .base import SqlModelRepository


class ChefRepository(SqlModelRepository[Chef]):
    """Repository for chef data access operations."""

    default_order = "name"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Chef)

    async def list_by_statuses(self, statuses: Iterable[str]) -> List[Chef]:
        """List chefs whose status is one of ``statuses``, ordered by name.

        Args:
            statuses: Accepted status values (e.g. ``active``, ``approved``)

        Returns:
            List of Chef instances
        """
        stmt = select(Chef).where(Chef.status.in_(list(statuses))).order_by(Chef.name.asc())  # type: ignore
        return await self._all(stmt)

    async def get_by_email(self, email: str) -> Optional[Chef]:
        return await self._first(select(Chef).where(Chef.email == email))

    async def is_marked_unavailable(self, chef_id: str, day: date) -> bool:
        """Check for an explicit "not available" record on ``day``."""
        stmt = select(ChefAvailability).where(
            (ChefAvailability.chef_id == chef_id)
            & (ChefAvailability.day == day)
            & (ChefAvailability.available == False)  # noqa: E712
        )
        result = await self.session.execute(stmt)
        return result.scalars().first() is not None

    async def set_availability(
        self, chef_id: str, day: date, available: bool, note: Optional[str] = None
    ) -> ChefAvailability:
        stmt = select(ChefAvailability).where((ChefAvailability.chef_id == chef_id) & (ChefAvailability.day == day))
        result = await self.session.execute(stmt)
        record = result.scalars().first()
        if record is None:
            record = ChefAvailability(chef_id=chef_id, day=day, available=available, note=note)
        else:
            record.available = available
            record.note = note
        self.session.add(record)
        await self.session.commit()
        await self.session.refresh(record)
        return record

    async def add_need(self, need: ChefNeed) -> ChefNeed:
        self.session.add(need)
        await self.session.commit()
        await self.session.refresh(need)
        return need

    async def list_needs(self, chef_id: str) -> List[ChefNeed]:
        """List a chef's ingredient needs ordered by start date (undated last)."""
        stmt = (
            select(ChefNeed)
            .where(ChefNeed.chef_id == chef_id)
            .order_by(ChefNeed.start_date.is_(None), ChefNeed.start_date.asc())  # type: ignore
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class ChefApplicationRepository(SqlModelRepository[ChefApplication]):
    """Repository for public chef applications."""

    default_order = "created_at"
    default_descending = True

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ChefApplication)

    async def get_by_email(self, email: str) -> Optional[ChefApplication]:
        return await self._first(select(ChefApplication).where(ChefApplication.email == email))
