"""
Impact I/O models.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ImpactMetricTotal(BaseModel):
    type: str
    metric: str
    unit: Optional[str] = None
    total: float
    events: int


class ImpactSummary(BaseModel):
    metrics: List[ImpactMetricTotal] = Field(default_factory=list)


class RecordImpactResponse(BaseModel):
    success: bool = True
    booking_id: str
    events_recorded: int


class MemberImpactScore(BaseModel):
    member_id: str
    impact_score: int = Field(ge=0, le=1000)
    breakdown: Dict[str, int] = Field(default_factory=dict)


class RecalculateScoresResponse(BaseModel):
    success: bool = True
    members_updated: int
    errors: List[str] = Field(default_factory=list)
