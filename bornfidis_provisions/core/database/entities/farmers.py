"""
Farmer entity models.

Farmers supply produce for bookings and are paid per assignment or per
delivered ingredient order. Applications submitted through the public join
form are stored separately until a coordinator approves them.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlmodel import Field, Text

from ..base import Base, dump_json_list, load_json_list, new_id, utc_now


class Farmer(Base, table=True):
    """Entity for approved farmers.

    Table: farmers
    """

    __tablename__ = "farmers"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=255, index=True)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)
    parish: Optional[str] = Field(default=None, max_length=64, index=True)
    acres: Optional[float] = Field(default=None, ge=0.0)
    status: str = Field(default="pending", max_length=16, index=True)
    certifications: str = Field(default="[]", description="JSON array of certifications")
    regenerative_practices: str = Field(default="[]", description="JSON array of practices")

    payout_account_id: Optional[str] = Field(default=None, max_length=128)
    payout_account_status: str = Field(default="not_connected", max_length=16)
    payouts_enabled: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def get_certifications_list(self) -> List[str]:
        return load_json_list(self.certifications)

    def __repr__(self) -> str:
        return f"Farmer(id={self.id}, name={self.name}, status={self.status})"


class FarmerCrop(Base, table=True):
    """A crop grown by a farmer.

    Table: farmer_crops
    """

    __tablename__ = "farmer_crops"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    farmer_id: str = Field(foreign_key="farmers.id", max_length=64, index=True)
    crop: str = Field(max_length=128, index=True)


class FarmerApplication(Base, table=True):
    """Entity for applications from the public farmer join form.

    Table: farmer_applications
    """

    __tablename__ = "farmer_applications"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=255)
    phone: str = Field(max_length=32, index=True, description="E.164 formatted phone number")
    parish: Optional[str] = Field(default=None, max_length=64)
    acres: Optional[float] = Field(default=None, ge=0.0)
    crops: str = Field(default="[]", description="JSON array of crops")
    voice_ready: bool = Field(default=False)
    language: str = Field(default="en", max_length=8)
    notes: Optional[str] = Field(default=None, sa_type=Text)
    status: str = Field(default="new", max_length=16, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)

    def set_crops_list(self, crops: List[str]) -> None:
        self.crops = dump_json_list(crops)
