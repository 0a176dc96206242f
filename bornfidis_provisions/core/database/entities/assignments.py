"""
Booking assignment entity models.

Assignments link a booking to the people who deliver it: exactly one chef
and any number of farmers (one per supply role). Each assignment carries its
own payout split and payout status.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now


class BookingChef(Base, table=True):
    """Chef assignment for a booking.

    Table: booking_chefs
    """

    __tablename__ = "booking_chefs"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    booking_id: str = Field(foreign_key="booking_inquiries.id", max_length=64, unique=True, index=True)
    chef_id: str = Field(foreign_key="chefs.id", max_length=64, index=True)
    status: str = Field(default="assigned", max_length=16, index=True)

    payout_percent: float = Field(default=70.0, ge=0.0, le=100.0)
    payout_amount_cents: int = Field(default=0)
    platform_fee_cents: int = Field(default=0)
    payout_status: str = Field(default="pending", max_length=16, index=True)
    transfer_id: Optional[str] = Field(default=None, max_length=128)

    completed_at: Optional[datetime] = Field(default=None)
    notes: Optional[str] = Field(default=None, sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"BookingChef(booking_id={self.booking_id}, chef_id={self.chef_id}, payout={self.payout_status})"


class BookingFarmer(Base, table=True):
    """Farmer assignment for a booking in a given supply role.

    Table: booking_farmers
    """

    __tablename__ = "booking_farmers"
    __table_args__ = (UniqueConstraint("booking_id", "farmer_id", "role", name="uq_booking_farmer_role"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    booking_id: str = Field(foreign_key="booking_inquiries.id", max_length=64, index=True)
    farmer_id: str = Field(foreign_key="farmers.id", max_length=64, index=True)
    role: str = Field(max_length=16)

    payout_percent: float = Field(default=60.0, ge=0.0, le=100.0)
    payout_amount_cents: int = Field(default=0)
    payout_status: str = Field(default="pending", max_length=16, index=True)
    payout_error: Optional[str] = Field(default=None, sa_type=Text)
    payout_failures: int = Field(default=0)
    transfer_id: Optional[str] = Field(default=None, max_length=128)
    paid_at: Optional[datetime] = Field(default=None)

    notes: Optional[str] = Field(default=None, sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"BookingFarmer(booking_id={self.booking_id}, farmer_id={self.farmer_id}, role={self.role})"
