"""
Chef I/O models: public applications, approvals, ingredient needs, tier reports and recommendations.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from bornfidis_provisions.core.models.domain import ChefTier, NeedFrequency

from .common import Email, blank_to_none


class ChefApplicationCreate(BaseModel):
    """Schema for the public chef application form."""

    email: Email = Field(description="Applicant email; one application per email")
    name: str = Field(min_length=2, max_length=255)
    phone: str = Field(min_length=10, max_length=32)
    bio: str = Field(min_length=50, description="Short professional biography")
    experience_years: int = Field(default=0, ge=0, le=50)
    specialties: List[str] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)
    website_url: Optional[str] = None
    instagram_handle: Optional[str] = None

    @field_validator("website_url", "instagram_handle")
    @classmethod
    def _blank(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class ChefApplicationResponse(BaseModel):
    success: bool = True
    application_id: str
    message: str = "Application submitted successfully"


class ChefTierRead(BaseModel):
    """Effective tier of a chef and the inputs it was derived from."""

    chef_id: str
    tier: ChefTier
    label: str
    multiplier: float
    computed_tier: ChefTier
    tier_override: Optional[ChefTier] = None
    on_time_rate_last_10: float
    on_time_rate_last_20: float
    certified: bool
    prep_perfect: bool


class ChefRecommendation(BaseModel):
    chef_id: str
    name: str
    tier: ChefTier
    tier_label: str
    total_score: float
    tier_score: int
    performance_score: int
    workload_score: int
    upcoming_assignments: int
    rating: Optional[float] = None
    on_time_percent: float = 0.0
    availability_status: str = "Available"


class ChefRecommendationsResponse(BaseModel):
    booking_id: str
    recommendations: List[ChefRecommendation] = Field(default_factory=list)
    warning: Optional[str] = None


class AvailabilityUpdate(BaseModel):
    available: bool
    note: Optional[str] = Field(default=None, max_length=255)


class AvailabilityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    chef_id: str
    day: date
    available: bool
    note: Optional[str] = None


class ChefRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: Optional[str] = None
    parish: Optional[str] = None
    status: str
    payout_account_status: str
    payouts_enabled: bool
    certified: bool
    prep_perfect: bool
    tier_override: Optional[str] = None
    rating: Optional[float] = None
    created_at: datetime


class ChefApprovalResponse(BaseModel):
    success: bool = True
    chef: ChefRead
    onboarding_url: Optional[str] = None
    message: str = "Chef approved successfully"


class ChefNeedCreate(BaseModel):
    """An ingredient a chef wants sourced, used for farmer matching."""

    crop: str = Field(min_length=1, max_length=128)
    quantity: float = Field(gt=0, description="Amount needed per delivery")
    frequency: NeedFrequency
    start_date: date
    end_date: Optional[date] = None

    @field_validator("crop")
    @classmethod
    def _crop_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Crop name is required")
        return v

    @field_validator("start_date")
    @classmethod
    def _not_in_past(cls, v: date) -> date:
        if v < date.today():
            raise ValueError("Start date must be today or in the future")
        return v

    @model_validator(mode="after")
    def _end_after_start(self) -> "ChefNeedCreate":
        if self.end_date is not None and self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class ChefNeedRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    chef_id: str
    crop: str
    quantity: Optional[str] = None
    frequency: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: datetime
