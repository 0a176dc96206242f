"""
Scheduling optimizer: recommends chefs for a booking.

Hard filter: the chef must be free on the event date (no "unavailable"
record for the day and no other live assignment that day).

Soft score (0-100 each), weighted 40/40/20:

- tier:        ELITE 100, PRO 67, STANDARD 33
- performance: rating (40) + on-time rate (30) + prep perfect (30)
- workload:    100 minus 5 per assignment in the 30 days from the event

The optimizer only recommends; admins still assign explicitly.
"""

from __future__ import annotations

from datetime import timedelta
from typing import List, Sequence

from bornfidis_provisions.core.database.entities.bookings import BookingInquiry
from bornfidis_provisions.core.database.entities.chefs import Chef
from bornfidis_provisions.core.database.repositories import SqlRepoBundle
from bornfidis_provisions.core.logging_config import get_logger
from bornfidis_provisions.core.models.domain import ChefStatus
from bornfidis_provisions.core.models.io.chefs import ChefRecommendation, ChefRecommendationsResponse

from .chef_tier import TIER_ORDINALS, ChefTierService, tier_label

logger = get_logger(__name__)

TIER_WEIGHT = 0.4
PERFORMANCE_WEIGHT = 0.4
WORKLOAD_WEIGHT = 0.2
TOP_N = 3
WORKLOAD_WINDOW_DAYS = 30

NO_CANDIDATES_WARNING = "No chefs to consider."
NONE_AVAILABLE_WARNING = "No chefs are available for this date & time. Use override to assign anyway."

CANDIDATE_STATUSES = (ChefStatus.active.value, ChefStatus.approved.value)


def tier_score(ordinal: int) -> int:
    return round(ordinal / 3 * 100)


def performance_score(rating: float | None, on_time_percent: float, prep_perfect: bool) -> int:
    prep_percent = 100 if prep_perfect else 0
    return round((rating or 0) / 5 * 40 + on_time_percent / 100 * 30 + prep_percent / 100 * 30)


def workload_score(upcoming_assignments: int) -> int:
    return max(0, min(100, 100 - 5 * upcoming_assignments))


def total_score(tier: int, performance: int, workload: int) -> float:
    return TIER_WEIGHT * tier + PERFORMANCE_WEIGHT * performance + WORKLOAD_WEIGHT * workload


class ChefOptimizer:
    def __init__(self, repos: SqlRepoBundle, tiers: ChefTierService) -> None:
        self.repos = repos
        self.tiers = tiers

    async def is_available(self, chef: Chef, booking: BookingInquiry) -> bool:
        """Check whether a chef is free on the booking's event date."""
        if booking.event_date is None:
            return True
        if await self.repos.chefs.is_marked_unavailable(chef.id, booking.event_date):
            return False
        conflicts = await self.repos.chef_assignments.count_in_window(
            chef.id, booking.event_date, booking.event_date, exclude_booking_id=booking.id
        )
        return conflicts == 0

    async def _score(self, chef: Chef, booking: BookingInquiry) -> ChefRecommendation:
        tier_info = await self.tiers.describe(chef)
        upcoming = 0
        if booking.event_date is not None:
            start = booking.event_date
            end = start + timedelta(days=WORKLOAD_WINDOW_DAYS - 1)
            upcoming = await self.repos.chef_assignments.count_in_window(chef.id, start, end)

        t_score = tier_score(TIER_ORDINALS[tier_info.tier])
        p_score = performance_score(chef.rating, tier_info.on_time_rate_last_10, chef.prep_perfect)
        w_score = workload_score(upcoming)
        return ChefRecommendation(
            chef_id=chef.id,
            name=chef.name,
            tier=tier_info.tier,
            tier_label=tier_label(tier_info.tier) or "Standard Chef",
            total_score=round(total_score(t_score, p_score, w_score), 2),
            tier_score=t_score,
            performance_score=p_score,
            workload_score=w_score,
            upcoming_assignments=upcoming,
            rating=chef.rating,
            on_time_percent=tier_info.on_time_rate_last_10,
        )

    async def recommend_chefs(self, booking: BookingInquiry, candidates: Sequence[Chef]) -> ChefRecommendationsResponse:
        """
        Rank candidate chefs for a booking.

        Args:
            booking: Booking to staff
            candidates: Chefs to consider (typically active or approved)

        Returns:
            Top three recommendations, best first, plus a warning when nobody qualifies
        """
        if not candidates:
            return ChefRecommendationsResponse(booking_id=booking.id, warning=NO_CANDIDATES_WARNING)

        eligible: List[ChefRecommendation] = []
        for chef in candidates:
            if not await self.is_available(chef, booking):
                logger.debug(f"Chef {chef.id} unavailable on {booking.event_date}; skipped")
                continue
            eligible.append(await self._score(chef, booking))

        if not eligible:
            return ChefRecommendationsResponse(booking_id=booking.id, warning=NONE_AVAILABLE_WARNING)

        eligible.sort(key=lambda r: r.total_score, reverse=True)
        return ChefRecommendationsResponse(booking_id=booking.id, recommendations=eligible[:TOP_N])

    async def recommend_for_booking(self, booking: BookingInquiry) -> ChefRecommendationsResponse:
        candidates = await self.repos.chefs.list_by_statuses(CANDIDATE_STATUSES)
        return await self.recommend_chefs(booking, candidates)
