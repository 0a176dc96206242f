"""
Booking I/O models for API requests and responses.

This module contains Pydantic-based I/O schemas for the public booking form
and for the admin booking endpoints (assignments, completion, payout hold).
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bornfidis_provisions.core.database.base import load_json_list
from bornfidis_provisions.core.models.domain import BookingStatus, FarmerRole

from .common import ActionResponse, OptionalEmail, PayoutResult, blank_to_none

_TIME = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class BookingSubmit(BaseModel):
    """Schema for the public booking inquiry form."""

    name: str = Field(min_length=2, max_length=255, description="Client name")
    email: OptionalEmail = Field(default=None, description="Client email (optional)")
    phone: str = Field(min_length=10, max_length=32, description="Client phone number")
    event_date: date = Field(description="Event date, today or later")
    event_time: Optional[str] = Field(default=None, description="Event start time as HH:MM")
    location: str = Field(min_length=10, max_length=512, description="Event address or venue")
    guests: Optional[int] = Field(default=None, ge=1, le=10000)
    budget_range: Optional[str] = Field(default=None, max_length=64)
    dietary_restrictions: Optional[str] = None
    notes: Optional[str] = None
    website_url: Optional[str] = Field(default=None, description="Honeypot field; must be left empty")

    @field_validator("name", "location", "phone")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()

    @field_validator("event_date")
    @classmethod
    def _not_in_past(cls, v: date) -> date:
        if v < date.today():
            raise ValueError("Event date must be today or in the future")
        return v

    @field_validator("event_time")
    @classmethod
    def _time_format(cls, v: Optional[str]) -> Optional[str]:
        v = blank_to_none(v)
        if v is not None and not _TIME.match(v):
            raise ValueError("Event time must be in HH:MM format")
        return v


class BookingSubmitResponse(BaseModel):
    success: bool = True
    booking_id: str
    message: str = "Booking inquiry received"


class BookingRead(BaseModel):
    """Schema for reading a booking from the admin API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    event_date: Optional[date] = None
    event_time: Optional[str] = None
    location: Optional[str] = None
    guests: Optional[int] = None
    budget_range: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    notes: Optional[str] = None
    status: str
    quote_total_cents: int
    deposit_amount_cents: int
    balance_amount_cents: int
    paid_at: Optional[datetime] = None
    balance_paid_at: Optional[datetime] = None
    fully_paid_at: Optional[datetime] = None
    job_completed_at: Optional[datetime] = None
    job_completed_by: Optional[str] = None
    assigned_chef_id: Optional[str] = None
    chef_payout_amount_cents: Optional[int] = None
    chef_payout_status: Optional[str] = None
    chef_payout_blockers: List[str] = Field(default_factory=list)
    chef_paid_at: Optional[datetime] = None
    stripe_transfer_id: Optional[str] = None
    payout_hold: bool
    payout_hold_reason: Optional[str] = None
    payout_released_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("chef_payout_blockers", mode="before")
    @classmethod
    def _decode_blockers(cls, v):
        return load_json_list(v) if isinstance(v, str) else v


class BookingQuoteUpdate(BaseModel):
    """Schema for setting a booking's quote (admin)."""

    quote_total_cents: int = Field(gt=0)
    deposit_amount_cents: Optional[int] = Field(default=None, ge=0)
    status: Optional[BookingStatus] = None


class AssignChefRequest(BaseModel):
    chef_id: str = Field(min_length=1, description="Chef to assign")
    payout_percent: float = Field(default=70.0, ge=0.0, le=100.0, description="Share of the quote paid to the chef")
    notes: Optional[str] = None


class ChefAssignmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    booking_id: str
    chef_id: str
    status: str
    payout_percent: float
    payout_amount_cents: int
    platform_fee_cents: int
    payout_status: str
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None


class AssignChefResponse(BaseModel):
    success: bool = True
    assignment: ChefAssignmentRead
    tier_multiplier: float = 1.0
    message: str = "Chef assigned successfully"


class AssignFarmerRequest(BaseModel):
    farmer_id: str = Field(min_length=1)
    role: FarmerRole
    payout_percent: float = Field(default=60.0, description="Share of the quote paid to the farmer (0-100)")
    notes: Optional[str] = None

    @field_validator("payout_percent")
    @classmethod
    def _percent_range(cls, v: float) -> float:
        if v < 0 or v > 100:
            raise ValueError("payout_percent must be between 0 and 100")
        return v


class FarmerAssignmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    booking_id: str
    farmer_id: str
    role: str
    payout_percent: float
    payout_amount_cents: int
    payout_status: str
    payout_error: Optional[str] = None
    transfer_id: Optional[str] = None
    paid_at: Optional[datetime] = None
    notes: Optional[str] = None


class AssignFarmerResponse(BaseModel):
    success: bool = True
    assignment: FarmerAssignmentRead
    message: str = "Farmer assigned successfully"


class PayoutHoldRequest(BaseModel):
    hold: Any = Field(default=None, description="true to hold, false to release; checked by the service")
    reason: Optional[str] = None


class ReleasePayoutResponse(ActionResponse):
    payout: Optional[PayoutResult] = None


class FarmerPayoutsResponse(BaseModel):
    success: bool = True
    farmer_payouts: List[PayoutResult] = Field(default_factory=list)
    ingredient_payouts: List[PayoutResult] = Field(default_factory=list)


class RunPayoutResponse(BaseModel):
    success: bool = True
    payout_created: bool = False
    payout_id: Optional[str] = None
    transfer_id: Optional[str] = None
    blockers: List[str] = Field(default_factory=list)
    message: str


class IngredientOrderLine(BaseModel):
    ingredient_id: str = Field(min_length=1)
    farmer_id: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    price_cents: int = Field(ge=0, description="Farmer price per unit in cents")


class IngredientOrdersRequest(BaseModel):
    orders: List[IngredientOrderLine] = Field(min_length=1)


class BookingIngredientRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    booking_id: str
    ingredient_id: str
    farmer_id: str
    quantity: float
    total_cents: int
    fulfillment_status: str
    payout_status: str


class IngredientOrdersResponse(BaseModel):
    success: bool = True
    orders_created: int
    orders: List[BookingIngredientRead] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
