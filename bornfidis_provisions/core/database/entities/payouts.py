"""
Chef payout ledger entity.

One row per booking. The unique ``booking_id`` is what makes chef payouts
idempotent: a retry reuses the existing row instead of creating a second
transfer.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now


class ChefPayout(Base, table=True):
    """Ledger entry for a chef payout transfer.

    Table: chef_payouts
    """

    __tablename__ = "chef_payouts"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    booking_id: str = Field(foreign_key="booking_inquiries.id", max_length=64, unique=True, index=True)
    chef_id: str = Field(foreign_key="chefs.id", max_length=64, index=True)
    amount_cents: int
    status: str = Field(default="pending", max_length=16, index=True)
    transfer_id: Optional[str] = Field(default=None, max_length=128)
    error_message: Optional[str] = Field(default=None, sa_type=Text)
    failed_attempts: int = Field(default=0, description="Recorded transfer failures; each one moves the idempotency key on")
    paid_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"ChefPayout(id={self.id}, booking_id={self.booking_id}, status={self.status})"
