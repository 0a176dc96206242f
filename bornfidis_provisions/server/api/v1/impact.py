"""
Impact Endpoints.

Aggregate impact totals, per-booking impact recording and cooperative
member scores.
"""

from __future__ import annotations

from fastapi import APIRouter

from bornfidis_provisions.core.models.io.impact import (
    ImpactSummary,
    MemberImpactScore,
    RecalculateScoresResponse,
    RecordImpactResponse,
)
from bornfidis_provisions.server.core.security import AdminUserDep
from bornfidis_provisions.server.services.deps import ImpactServiceDep

router = APIRouter(tags=["impact"])


@router.get(
    "/summary",
    response_model=ImpactSummary,
    summary="Impact Summary",
    description="Totals of every recorded impact metric.",
    response_description="One total per (type, metric, unit).",
)
async def impact_summary(impact: ImpactServiceDep) -> ImpactSummary:
    return await impact.impact_summary()


@router.post(
    "/bookings/{booking_id}",
    response_model=RecordImpactResponse,
    summary="Record Booking Impact",
    description="Derive and store the impact events of a booking, replacing any recorded before.",
    response_description="Number of events recorded.",
    responses={404: {"description": "Booking not found"}},
)
async def record_booking_impact(
    booking_id: str, _admin: AdminUserDep, impact: ImpactServiceDep
) -> RecordImpactResponse:
    return await impact.record_booking_impact(booking_id)


@router.get(
    "/members/{member_id}/score",
    response_model=MemberImpactScore,
    summary="Member Impact Score",
    description="Compute a cooperative member's impact score (0-1000) with its breakdown.",
    response_description="Score and breakdown.",
    responses={404: {"description": "Member not found"}},
)
async def member_score(member_id: str, _admin: AdminUserDep, impact: ImpactServiceDep) -> MemberImpactScore:
    return await impact.calculate_member_impact_score(member_id)


@router.post(
    "/members/recalculate",
    response_model=RecalculateScoresResponse,
    summary="Recalculate Member Scores",
    description="Recompute and store the impact score of every active cooperative member.",
    response_description="Number of members updated and any per-member errors.",
)
async def recalculate_scores(_admin: AdminUserDep, impact: ImpactServiceDep) -> RecalculateScoresResponse:
    return await impact.recalculate_all_member_scores()
