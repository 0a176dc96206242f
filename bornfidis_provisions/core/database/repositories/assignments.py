"""
Assignments repository.

Data access for chef and farmer assignments to bookings, including the
queries used by tiering (completed history) and the optimizer (workload
and date conflicts).
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.assignments import BookingChef, BookingFarmer
from ..entities.bookings import BookingInquiry
from .base import SqlModelRepository


class ChefAssignmentRepository(SqlModelRepository[BookingChef]):
    """Repository for chef assignments."""

    default_order = "created_at"
    default_descending = True

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, BookingChef)

    async def get_by_booking(self, booking_id: str) -> Optional[BookingChef]:
        return await self._first(select(BookingChef).where(BookingChef.booking_id == booking_id))

    async def list_completed_with_bookings(
        self, chef_id: str, limit: int
    ) -> List[Tuple[BookingChef, BookingInquiry]]:
        """Most recent completed assignments of a chef, newest first.

        Args:
            chef_id: Chef identifier
            limit: Number of assignments to return

        Returns:
            ``(assignment, booking)`` pairs
        """
        stmt = (
            select(BookingChef, BookingInquiry)
            .join(BookingInquiry, BookingInquiry.id == BookingChef.booking_id)  # type: ignore
            .where((BookingChef.chef_id == chef_id) & (BookingChef.completed_at.is_not(None)))  # type: ignore
            .order_by(BookingChef.completed_at.desc())  # type: ignore
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    async def list_paid_with_bookings(self, chef_id: str) -> List[Tuple[BookingChef, BookingInquiry]]:
        stmt = (
            select(BookingChef, BookingInquiry)
            .join(BookingInquiry, BookingInquiry.id == BookingChef.booking_id)  # type: ignore
            .where((BookingChef.chef_id == chef_id) & (BookingChef.payout_status == "paid"))
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    async def count_in_window(
        self, chef_id: str, start: date, end: date, *, exclude_booking_id: Optional[str] = None
    ) -> int:
        """Count a chef's non-cancelled assignments whose event falls in ``[start, end]``."""
        stmt = (
            select(func.count())
            .select_from(BookingChef)
            .join(BookingInquiry, BookingInquiry.id == BookingChef.booking_id)  # type: ignore
            .where(
                (BookingChef.chef_id == chef_id)
                & (BookingChef.status != "cancelled")
                & (BookingInquiry.event_date >= start)  # type: ignore
                & (BookingInquiry.event_date <= end)  # type: ignore
            )
        )
        if exclude_booking_id:
            stmt = stmt.where(BookingChef.booking_id != exclude_booking_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())


class FarmerAssignmentRepository(SqlModelRepository[BookingFarmer]):
    """Repository for farmer assignments."""

    default_order = "created_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, BookingFarmer)

    async def find(self, booking_id: str, farmer_id: str, role: str) -> Optional[BookingFarmer]:
        stmt = select(BookingFarmer).where(
            (BookingFarmer.booking_id == booking_id)
            & (BookingFarmer.farmer_id == farmer_id)
            & (BookingFarmer.role == role)
        )
        return await self._first(stmt)

    async def list_for_booking(
        self, booking_id: str, *, payout_statuses: Optional[Iterable[str]] = None
    ) -> List[BookingFarmer]:
        stmt = select(BookingFarmer).where(BookingFarmer.booking_id == booking_id)
        if payout_statuses is not None:
            stmt = stmt.where(BookingFarmer.payout_status.in_(list(payout_statuses)))  # type: ignore
        return await self._all(stmt.order_by(BookingFarmer.created_at.asc()))  # type: ignore

    async def count_paid_for_farmer(self, farmer_id: str) -> int:
        stmt = select(func.count()).select_from(BookingFarmer).where(
            (BookingFarmer.farmer_id == farmer_id) & (BookingFarmer.payout_status == "paid")
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
