"""
Ingredients repository.

Data access for the ingredient catalogue and booking ingredient orders.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.ingredients import BookingIngredient, Ingredient
from .base import SqlModelRepository


class IngredientRepository(SqlModelRepository[Ingredient]):
    default_order = "name"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Ingredient)


class BookingIngredientRepository(SqlModelRepository[BookingIngredient]):
    """Repository for booking ingredient orders."""

    default_order = "created_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, BookingIngredient)

    async def list_for_booking(
        self,
        booking_id: str,
        *,
        payout_statuses: Optional[Iterable[str]] = None,
        fulfillment_statuses: Optional[Iterable[str]] = None,
    ) -> List[BookingIngredient]:
        stmt = select(BookingIngredient).where(BookingIngredient.booking_id == booking_id)
        if payout_statuses is not None:
            stmt = stmt.where(BookingIngredient.payout_status.in_(list(payout_statuses)))  # type: ignore
        if fulfillment_statuses is not None:
            stmt = stmt.where(BookingIngredient.fulfillment_status.in_(list(fulfillment_statuses)))  # type: ignore
        return await self._all(stmt.order_by(BookingIngredient.created_at.asc()))  # type: ignore

    async def list_with_ingredient(self, booking_id: str) -> List[Tuple[BookingIngredient, Ingredient]]:
        """List a booking's ingredient orders joined with their catalogue entries."""
        stmt = (
            select(BookingIngredient, Ingredient)
            .join(Ingredient, Ingredient.id == BookingIngredient.ingredient_id)  # type: ignore
            .where(BookingIngredient.booking_id == booking_id)
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    async def find_order(self, booking_id: str, ingredient_id: str, farmer_id: str) -> Optional[BookingIngredient]:
        return await self._first(
            select(BookingIngredient).where(
                (BookingIngredient.booking_id == booking_id)
                & (BookingIngredient.ingredient_id == ingredient_id)
                & (BookingIngredient.farmer_id == farmer_id)
            )
        )

    async def count_paid_for_farmer(self, farmer_id: str) -> int:
        stmt = select(func.count()).select_from(BookingIngredient).where(
            (BookingIngredient.farmer_id == farmer_id) & (BookingIngredient.payout_status == "paid")
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
