"""
Booking inquiry entity models.

A booking inquiry is a client's catering or event request. Beyond the
submitted details it carries the commercial state of the job: quote and
payment milestones, job completion, and the denormalised chef payout
status used by the admin dashboard.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from sqlmodel import Field, Text

from ..base import Base, dump_json_list, load_json_list, new_id, utc_now


class BookingInquiry(Base, table=True):
    """Entity for client booking inquiries.

    Table: booking_inquiries
    """

    __tablename__ = "booking_inquiries"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)

    # Client-submitted details
    name: str = Field(max_length=255)
    email: Optional[str] = Field(default=None, max_length=255, index=True)
    phone: Optional[str] = Field(default=None, max_length=32)
    event_date: Optional[date] = Field(default=None, index=True)
    event_time: Optional[str] = Field(default=None, max_length=5, description="Local time as HH:MM")
    location: Optional[str] = Field(default=None, max_length=512)
    guests: Optional[int] = Field(default=None, ge=0)
    budget_range: Optional[str] = Field(default=None, max_length=64)
    dietary_restrictions: Optional[str] = Field(default=None, sa_type=Text)
    notes: Optional[str] = Field(default=None, sa_type=Text)
    status: str = Field(default="New", max_length=32, index=True)

    # Quote and payment milestones
    quote_total_cents: int = Field(default=0)
    deposit_amount_cents: int = Field(default=0)
    balance_amount_cents: int = Field(default=0)
    paid_at: Optional[datetime] = Field(default=None)
    balance_paid_at: Optional[datetime] = Field(default=None)
    fully_paid_at: Optional[datetime] = Field(default=None)

    # Job completion
    job_completed_at: Optional[datetime] = Field(default=None)
    job_completed_by: Optional[str] = Field(default=None, max_length=64)

    # Chef payout (mirrors the booking_chefs assignment and the payout ledger)
    assigned_chef_id: Optional[str] = Field(default=None, foreign_key="chefs.id", max_length=64, index=True)
    chef_payout_amount_cents: Optional[int] = Field(default=None)
    chef_payout_status: Optional[str] = Field(default=None, max_length=16, index=True)
    chef_payout_blockers: str = Field(default="[]", description="JSON array of blocker messages")
    chef_paid_at: Optional[datetime] = Field(default=None)
    stripe_transfer_id: Optional[str] = Field(default=None, max_length=128)

    # Admin payout hold
    payout_hold: bool = Field(default=False)
    payout_hold_reason: Optional[str] = Field(default=None, sa_type=Text)
    payout_released_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def get_blockers_list(self) -> List[str]:
        """Get chef payout blockers as a list."""
        return load_json_list(self.chef_payout_blockers)

    def set_blockers_list(self, blockers: List[str]) -> None:
        """Set chef payout blockers from a list."""
        self.chef_payout_blockers = dump_json_list(blockers)

    @property
    def is_fully_paid(self) -> bool:
        return self.fully_paid_at is not None

    @property
    def is_job_completed(self) -> bool:
        return self.job_completed_at is not None

    def __repr__(self) -> str:
        return f"BookingInquiry(id={self.id}, name={self.name}, status={self.status})"
