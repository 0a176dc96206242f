"""
Farmer I/O models: the public join form, approvals and farmer matching results.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bornfidis_provisions.core.models.domain import FarmerLanguage

from .common import OptionalEmail, blank_to_none


class FarmerJoinRequest(BaseModel):
    """Schema for the public farmer join form."""

    name: str = Field(min_length=2, max_length=255)
    phone: str = Field(min_length=1, max_length=32, description="Phone as typed; normalised server-side")
    parish: Optional[str] = Field(default=None, max_length=64)
    acres: Optional[Union[float, str]] = Field(default=None, description="Farm size in acres")
    crops: List[str] = Field(default_factory=list)
    voice_ready: bool = False
    language: FarmerLanguage = FarmerLanguage.english
    notes: Optional[str] = None

    @field_validator("acres")
    @classmethod
    def _parse_acres(cls, v: Optional[Union[float, str]]) -> Optional[float]:
        if v is None:
            return None
        if isinstance(v, str):
            v = blank_to_none(v)
            if v is None:
                return None
            try:
                v = float(v)
            except ValueError:
                raise ValueError("Acres must be a number")
        if v < 0:
            raise ValueError("Acres must be a number")
        return float(v)

    @field_validator("crops")
    @classmethod
    def _clean_crops(cls, v: List[str]) -> List[str]:
        return [c.strip() for c in v if c and c.strip()]


class FarmerJoinResponse(BaseModel):
    success: bool = True
    application_id: str
    message: str = "Application submitted successfully. You will receive a confirmation text shortly."


class FarmerApprovalRequest(BaseModel):
    email: OptionalEmail = Field(default=None, description="Needed to open a payout account; onboarding starts when set")


class FarmerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    parish: Optional[str] = None
    acres: Optional[float] = None
    status: str
    payout_account_status: str
    payouts_enabled: bool
    created_at: datetime


class FarmerApprovalResponse(BaseModel):
    success: bool = True
    farmer: FarmerRead
    crops: List[str] = Field(default_factory=list)
    onboarding_url: Optional[str] = None
    message: str = "Farmer approved successfully"


class ScoreBreakdown(BaseModel):
    crop_match: float
    parish_match: float
    acres_score: float


class FarmerMatch(BaseModel):
    farmer_id: str
    name: str
    phone: Optional[str] = None
    parish: Optional[str] = None
    acres: Optional[float] = None
    crop: str
    match_score: float
    score_breakdown: ScoreBreakdown


class NeedMatches(BaseModel):
    need_id: str
    crop: str
    quantity: Optional[str] = None
    frequency: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    matches: List[FarmerMatch] = Field(default_factory=list)
