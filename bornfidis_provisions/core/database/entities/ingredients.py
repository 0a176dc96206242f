"""
Ingredient entity models.

Ingredients carry a regenerative score used for soil-health impact. A
booking ingredient is an order of one ingredient from one farmer for one
booking, paid out to the farmer once delivered.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class Ingredient(Base, table=True):
    """Catalogue ingredient.

    Table: ingredients
    """

    __tablename__ = "ingredients"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=128, index=True)
    unit: str = Field(default="lb", max_length=16)
    regenerative_score: int = Field(default=0, ge=0, le=10)


class BookingIngredient(Base, table=True):
    """Ingredient order placed with a farmer for a booking.

    Table: booking_ingredients
    """

    __tablename__ = "booking_ingredients"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    booking_id: str = Field(foreign_key="booking_inquiries.id", max_length=64, index=True)
    ingredient_id: str = Field(foreign_key="ingredients.id", max_length=64, index=True)
    farmer_id: str = Field(foreign_key="farmers.id", max_length=64, index=True)
    quantity: float = Field(default=0.0, ge=0.0)
    total_cents: int = Field(default=0)
    fulfillment_status: str = Field(default="pending", max_length=16, index=True)
    payout_status: str = Field(default="pending", max_length=16, index=True)
    payout_failures: int = Field(default=0)
    transfer_id: Optional[str] = Field(default=None, max_length=128)
    paid_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
