"""
Chef entity models.

This module contains chefs, their applications, their per-day availability
and the ingredient needs chefs publish for farmer matching.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Text

from ..base import Base, dump_json_list, load_json_list, new_id, utc_now


class Chef(Base, table=True):
    """Entity for approved chefs who can be assigned to bookings.

    Table: chefs
    """

    __tablename__ = "chefs"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=255, index=True)
    email: str = Field(max_length=255, index=True)
    phone: Optional[str] = Field(default=None, max_length=32)
    parish: Optional[str] = Field(default=None, max_length=64)
    status: str = Field(default="pending", max_length=16, index=True)
    bio: Optional[str] = Field(default=None, sa_type=Text)
    specialties: str = Field(default="[]", description="JSON array of specialties")
    certifications: str = Field(default="[]", description="JSON array of certifications")

    # Payout account at the payments provider
    payout_account_id: Optional[str] = Field(default=None, max_length=128)
    payout_account_status: str = Field(default="not_connected", max_length=16)
    payouts_enabled: bool = Field(default=False)

    # Tier inputs
    certified: bool = Field(default=False)
    prep_perfect: bool = Field(default=False)
    tier_override: Optional[str] = Field(default=None, max_length=16)
    rating: Optional[float] = Field(default=None, ge=0.0, le=5.0)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def get_specialties_list(self) -> List[str]:
        return load_json_list(self.specialties)

    def get_certifications_list(self) -> List[str]:
        return load_json_list(self.certifications)

    def __repr__(self) -> str:
        return f"Chef(id={self.id}, name={self.name}, status={self.status})"


class ChefApplication(Base, table=True):
    """Entity for public chef applications awaiting review.

    Table: chef_applications
    """

    __tablename__ = "chef_applications"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    email: str = Field(max_length=255, unique=True, index=True)
    name: str = Field(max_length=255)
    phone: str = Field(max_length=32)
    bio: str = Field(sa_type=Text)
    experience_years: int = Field(default=0, ge=0, le=50)
    specialties: str = Field(default="[]", description="JSON array of specialties")
    certifications: str = Field(default="[]", description="JSON array of certifications")
    website_url: Optional[str] = Field(default=None, max_length=512)
    instagram_handle: Optional[str] = Field(default=None, max_length=128)
    status: str = Field(default="pending", max_length=16, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)

    def set_specialties_list(self, values: List[str]) -> None:
        self.specialties = dump_json_list(values)

    def set_certifications_list(self, values: List[str]) -> None:
        self.certifications = dump_json_list(values)


class ChefAvailability(Base, table=True):
    """Explicit per-day availability record for a chef.

    Days without a record are treated as available.

    Table: chef_availability
    """

    __tablename__ = "chef_availability"
    __table_args__ = (UniqueConstraint("chef_id", "day", name="uq_chef_availability_day"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    chef_id: str = Field(foreign_key="chefs.id", max_length=64, index=True)
    day: date = Field(index=True)
    available: bool = Field(default=True)
    note: Optional[str] = Field(default=None, max_length=255)


class ChefNeed(Base, table=True):
    """An ingredient a chef needs sourced over a period.

    Table: chef_needs
    """

    __tablename__ = "chef_needs"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    chef_id: str = Field(foreign_key="chefs.id", max_length=64, index=True)
    crop: str = Field(max_length=128)
    quantity: Optional[str] = Field(default=None, max_length=64)
    frequency: Optional[str] = Field(default=None, max_length=64)
    start_date: Optional[date] = Field(default=None)
    end_date: Optional[date] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
