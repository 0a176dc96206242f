"""
Bookings repository.

Data access for booking inquiries.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.bookings import BookingInquiry
from .base import SqlModelRepository


class BookingRepository(SqlModelRepository[BookingInquiry]):
    """Repository for booking inquiry data access operations."""

    default_order = "created_at"
    default_descending = True

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, BookingInquiry)
