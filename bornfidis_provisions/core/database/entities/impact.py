"""
Impact entity models.

Impact events are append-only measurements (soil health, income, meals)
derived from completed bookings. Cooperative members accumulate an impact
score from their contributions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now


class ImpactEvent(Base, table=True):
    """Entity for a single impact measurement.

    Table: impact_events
    """

    __tablename__ = "impact_events"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    type: str = Field(max_length=16, index=True)
    booking_id: Optional[str] = Field(default=None, foreign_key="booking_inquiries.id", max_length=64, index=True)
    reference_id: Optional[str] = Field(default=None, max_length=64, index=True)
    reference_type: Optional[str] = Field(default=None, max_length=32)
    metric: str = Field(max_length=64, index=True)
    value: float = Field(default=0.0)
    unit: Optional[str] = Field(default=None, max_length=32)
    description: Optional[str] = Field(default=None, sa_type=Text)
    # "metadata" is reserved on declarative models
    details: Dict[str, Any] = Field(default_factory=dict, sa_column=Column("metadata", JSON, nullable=False))
    created_at: datetime = Field(default_factory=utc_now, index=True)


class CooperativeMember(Base, table=True):
    """Member of the Bornfidis cooperative.

    Table: cooperative_members
    """

    __tablename__ = "cooperative_members"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=255)
    role: str = Field(max_length=16, index=True)
    farmer_id: Optional[str] = Field(default=None, foreign_key="farmers.id", max_length=64)
    chef_id: Optional[str] = Field(default=None, foreign_key="chefs.id", max_length=64)
    status: str = Field(default="active", max_length=16, index=True)
    impact_score: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now)


class MemberTraining(Base, table=True):
    """Training taken by a cooperative member.

    Table: cooperative_member_training
    """

    __tablename__ = "cooperative_member_training"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    member_id: str = Field(foreign_key="cooperative_members.id", max_length=64, index=True)
    training_name: str = Field(max_length=255)
    completed_at: Optional[datetime] = Field(default=None)
