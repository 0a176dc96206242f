"""
Impact tracking.

Bookings that complete produce impact events (soil health, income, meals,
families supported, ingredients sourced). Cooperative members earn an
impact score (0-1000) from their own contributions.
"""

from __future__ import annotations

import math
from typing import Dict, List

from bornfidis_provisions.core.database.entities.impact import CooperativeMember, ImpactEvent
from bornfidis_provisions.core.database.repositories import SqlRepoBundle
from bornfidis_provisions.core.errors import NotFoundError
from bornfidis_provisions.core.logging_config import get_logger
from bornfidis_provisions.core.models.domain import ImpactType, MemberRole, PayoutStatus
from bornfidis_provisions.core.models.io.impact import (
    ImpactMetricTotal,
    ImpactSummary,
    MemberImpactScore,
    RecalculateScoresResponse,
    RecordImpactResponse,
)

logger = get_logger(__name__)

GUESTS_PER_FAMILY = 4
MAX_MEMBER_SCORE = 1000
MAX_COMMUNITY_SCORE = 100
ROLE_BASE_SCORE = 50
ROLES_WITH_BASE_SCORE = (MemberRole.educator.value, MemberRole.builder.value, MemberRole.partner.value)


def _plural(count: float, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


class ImpactService:
    def __init__(self, repos: SqlRepoBundle) -> None:
        self.repos = repos

    async def build_booking_events(self, booking_id: str) -> List[ImpactEvent]:
        """Derive the impact events of a booking from its current state."""
        booking = await self.repos.bookings.get_by_id(booking_id)
        if booking is None:
            raise NotFoundError("Booking", booking_id)

        events: List[ImpactEvent] = []
        ingredients = await self.repos.booking_ingredients.list_with_ingredient(booking_id)

        soil_points = sum(ingredient.regenerative_score * (order.quantity or 0) for order, ingredient in ingredients)
        if soil_points > 0:
            events.append(
                ImpactEvent(
                    type=ImpactType.soil.value,
                    booking_id=booking_id,
                    metric="soil_health_points",
                    value=soil_points,
                    unit="points",
                    description=(
                        f"Soil health impact from {len(ingredients)} regenerative "
                        f"{_plural(len(ingredients), 'ingredient', 'ingredients')}"
                    ),
                    details={
                        "ingredients": [
                            {"name": i.name, "score": i.regenerative_score, "quantity": o.quantity}
                            for o, i in ingredients
                        ]
                    },
                )
            )

        paid_farmers = await self.repos.farmer_assignments.list_for_booking(
            booking_id, payout_statuses=[PayoutStatus.paid.value]
        )
        for assignment in paid_farmers:
            if assignment.payout_amount_cents > 0:
                events.append(
                    ImpactEvent(
                        type=ImpactType.farmer.value,
                        booking_id=booking_id,
                        reference_id=assignment.farmer_id,
                        reference_type="farmer",
                        metric="income_cents",
                        value=assignment.payout_amount_cents,
                        unit="cents",
                        description=f"Farmer income ({assignment.role})",
                        details={"role": assignment.role, "booking_farmer_id": assignment.id},
                    )
                )

        for order, ingredient in ingredients:
            if order.payout_status == PayoutStatus.paid.value and order.total_cents > 0:
                events.append(
                    ImpactEvent(
                        type=ImpactType.farmer.value,
                        booking_id=booking_id,
                        reference_id=order.farmer_id,
                        reference_type="farmer",
                        metric="income_cents",
                        value=order.total_cents,
                        unit="cents",
                        description=f"Farmer income from ingredient sourcing: {ingredient.name}",
                        details={"ingredient": ingredient.name, "booking_ingredient_id": order.id},
                    )
                )

        chef_assignment = await self.repos.chef_assignments.get_by_booking(booking_id)
        if (
            chef_assignment is not None
            and chef_assignment.payout_status == PayoutStatus.paid.value
            and chef_assignment.payout_amount_cents > 0
        ):
            events.append(
                ImpactEvent(
                    type=ImpactType.chef.value,
                    booking_id=booking_id,
                    reference_id=chef_assignment.chef_id,
                    reference_type="chef",
                    metric="income_cents",
                    value=chef_assignment.payout_amount_cents,
                    unit="cents",
                    description="Chef income",
                )
            )

        guests = booking.guests or 0
        if guests > 0:
            events.append(
                ImpactEvent(
                    type=ImpactType.guest.value,
                    booking_id=booking_id,
                    metric="meals_served",
                    value=guests,
                    unit="meals",
                    description=f"{guests} {_plural(guests, 'meal', 'meals')} served at {booking.name}",
                    details={"event_name": booking.name},
                )
            )
            families = math.ceil(guests / GUESTS_PER_FAMILY)
            events.append(
                ImpactEvent(
                    type=ImpactType.community.value,
                    booking_id=booking_id,
                    metric="families_supported",
                    value=families,
                    unit="families",
                    description=f"Supported {families} {_plural(families, 'family', 'families')} through {booking.name}",
                    details={"event_name": booking.name, "guests": guests},
                )
            )

        if ingredients:
            events.append(
                ImpactEvent(
                    type=ImpactType.community.value,
                    booking_id=booking_id,
                    metric="ingredients_sourced",
                    value=len(ingredients),
                    unit="ingredients",
                    description=f"Sourced {len(ingredients)} local {_plural(len(ingredients), 'ingredient', 'ingredients')}",
                )
            )
        return events

    async def record_booking_impact(self, booking_id: str) -> RecordImpactResponse:
        """
        Record (or re-record) the impact events for a booking.

        Any events previously recorded for the booking are replaced, so the
        operation can be repeated safely.
        """
        events = await self.build_booking_events(booking_id)
        await self.repos.impact_events.replace_for_booking(booking_id, events)
        logger.info(f"Recorded {len(events)} impact events for booking {booking_id}")
        return RecordImpactResponse(booking_id=booking_id, events_recorded=len(events))

    async def impact_summary(self) -> ImpactSummary:
        rows = await self.repos.impact_events.totals_by_metric()
        return ImpactSummary(
            metrics=[
                ImpactMetricTotal(type=t, metric=metric, unit=unit, total=total, events=count)
                for t, metric, unit, total, count in rows
            ]
        )

    async def _score(self, member: CooperativeMember) -> MemberImpactScore:
        if member.status != "active":
            return MemberImpactScore(member_id=member.id, impact_score=0)

        breakdown: Dict[str, int] = {}

        if member.role == MemberRole.farmer.value or member.farmer_id:
            farmer_id = member.farmer_id or member.id
            breakdown["ingredients_sourced"] = 10 * await self.repos.booking_ingredients.count_paid_for_farmer(farmer_id)
            breakdown["farmer_assignments"] = 20 * await self.repos.farmer_assignments.count_paid_for_farmer(farmer_id)
            farmer = await self.repos.farmers.get_by_id(farmer_id)
            if farmer is not None:
                breakdown["regenerative_practices"] = 15 * len(farmer.get_certifications_list())

        if member.role == MemberRole.chef.value or member.chef_id:
            chef_id = member.chef_id or member.id
            paid = await self.repos.chef_assignments.list_paid_with_bookings(chef_id)
            breakdown["chef_bookings"] = 30 * len(paid)
            breakdown["meals_served"] = sum(booking.guests or 0 for _, booking in paid) // 10

        breakdown["training_completion"] = 5 * await self.repos.members.count_completed_trainings(member.id)

        references = await self.repos.impact_events.count_referencing([member.id, member.farmer_id, member.chef_id])
        breakdown["community_engagement"] = min(2 * references, MAX_COMMUNITY_SCORE)

        if member.role in ROLES_WITH_BASE_SCORE:
            breakdown[f"{member.role}_base"] = ROLE_BASE_SCORE

        score = min(sum(breakdown.values()), MAX_MEMBER_SCORE)
        return MemberImpactScore(member_id=member.id, impact_score=score, breakdown=breakdown)

    async def calculate_member_impact_score(self, member_id: str) -> MemberImpactScore:
        member = await self.repos.members.get_by_id(member_id)
        if member is None:
            raise NotFoundError("Member", member_id)
        return await self._score(member)

    async def recalculate_all_member_scores(self) -> RecalculateScoresResponse:
        """Recompute and persist the impact score of every active member."""
        scores: Dict[str, int] = {}
        errors: List[str] = []
        for member in await self.repos.members.list_active():
            try:
                scores[member.id] = (await self._score(member)).impact_score
            except Exception as e:
                logger.warning(f"Failed to calculate impact score for member {member.id}: {e}")
                errors.append(f"Failed to calculate for {member.id}: {e}")
        updated = await self.repos.members.save_scores(scores)
        logger.info(f"Recalculated impact scores for {updated} members ({len(errors)} errors)")
        return RecalculateScoresResponse(members_updated=updated, errors=errors)
