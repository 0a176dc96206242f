"""
Admin booking workflow.

Covers everything an admin does to a booking after the public inquiry:
quoting, staffing (chef and farmer assignments), ingredient orders, confirming completion,
holding or releasing the chef payout and triggering payouts manually.
"""

from __future__ import annotations

import math
from typing import List, Optional

from bornfidis_provisions.core.database.base import utc_now
from bornfidis_provisions.core.database.entities.assignments import BookingChef, BookingFarmer
from bornfidis_provisions.core.database.entities.bookings import BookingInquiry
from bornfidis_provisions.core.database.entities.ingredients import BookingIngredient
from bornfidis_provisions.core.database.repositories import SqlRepoBundle
from bornfidis_provisions.core.errors import ConflictError, ExternalServiceError, NotFoundError, ValidationFailedError
from bornfidis_provisions.core.logging_config import get_logger
from bornfidis_provisions.core.models.domain import (
    BookingStatus,
    ChefAssignmentStatus,
    ChefStatus,
    FarmerStatus,
    FulfillmentStatus,
    PayoutStatus,
)
from bornfidis_provisions.core.models.io.bookings import (
    AssignChefRequest,
    AssignChefResponse,
    AssignFarmerRequest,
    AssignFarmerResponse,
    BookingIngredientRead,
    BookingQuoteUpdate,
    BookingRead,
    ChefAssignmentRead,
    FarmerAssignmentRead,
    FarmerPayoutsResponse,
    IngredientOrdersRequest,
    IngredientOrdersResponse,
    ReleasePayoutResponse,
    RunPayoutResponse,
)
from bornfidis_provisions.core.models.io.chefs import ChefRecommendationsResponse
from bornfidis_provisions.core.models.io.common import ActionResponse

from .chef_optimizer import ChefOptimizer
from .chef_tier import ChefTierService
from .payouts import PayoutEngine

logger = get_logger(__name__)

ASSIGNABLE_CHEF_STATUSES = (ChefStatus.active.value, ChefStatus.approved.value)


def split_amount(total_cents: int, percent: float) -> int:
    """Share of ``total_cents`` for ``percent``, rounded half up to whole cents."""
    return math.floor(total_cents * percent / 100 + 0.5)


class BookingAdminService:
    def __init__(
        self,
        repos: SqlRepoBundle,
        payouts: PayoutEngine,
        tiers: ChefTierService,
        optimizer: ChefOptimizer,
    ) -> None:
        self.repos = repos
        self.payouts = payouts
        self.tiers = tiers
        self.optimizer = optimizer

    async def _booking(self, booking_id: str) -> BookingInquiry:
        booking = await self.repos.bookings.get_by_id(booking_id)
        if booking is None:
            raise NotFoundError("Booking", booking_id)
        return booking

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_bookings(
        self, status: Optional[str] = None, limit: Optional[int] = 50, offset: Optional[int] = 0
    ) -> List[BookingRead]:
        bookings = await self.repos.bookings.list(limit=limit, offset=offset, filters={"status": status})
        return [BookingRead.model_validate(b) for b in bookings]

    async def get_booking(self, booking_id: str) -> BookingRead:
        return BookingRead.model_validate(await self._booking(booking_id))

    async def set_quote(self, booking_id: str, quote: BookingQuoteUpdate) -> BookingRead:
        booking = await self._booking(booking_id)
        deposit = quote.deposit_amount_cents
        if deposit is None:
            deposit = booking.deposit_amount_cents or 0
        if deposit > quote.quote_total_cents:
            raise ValidationFailedError("Deposit cannot exceed the quote total")

        booking.quote_total_cents = quote.quote_total_cents
        booking.deposit_amount_cents = deposit
        booking.balance_amount_cents = quote.quote_total_cents - deposit
        booking.status = (quote.status or BookingStatus.quoted).value
        booking = await self.repos.bookings.update(booking)
        logger.info(f"Quoted booking {booking_id}: {booking.quote_total_cents} cents")
        return BookingRead.model_validate(booking)

    # ------------------------------------------------------------------
    # Assignments
    # ------------------------------------------------------------------

    async def assign_chef(self, booking_id: str, request: AssignChefRequest) -> AssignChefResponse:
        """
        Assign a chef to a booking and compute the payout split.

        The payout percent is scaled by the chef's tier multiplier (capped at
        100%) when tiered rates are enabled. The platform keeps the rest.

        Raises:
            NotFoundError: Booking or chef missing
            ValidationFailedError: No quote, or chef not assignable
            ConflictError: Booking already has a chef
        """
        booking = await self._booking(booking_id)
        total = booking.quote_total_cents or 0
        if total <= 0:
            raise ValidationFailedError("Booking must have a quote before assigning a chef")

        chef = await self.repos.chefs.get_by_id(request.chef_id)
        if chef is None:
            raise NotFoundError("Chef", request.chef_id)
        if chef.status not in ASSIGNABLE_CHEF_STATUSES:
            raise ValidationFailedError(f"Chef must be active or approved (current status: {chef.status})")

        if booking.assigned_chef_id or await self.repos.chef_assignments.get_by_booking(booking_id):
            raise ConflictError("Booking already has an assigned chef")

        tier_info = await self.tiers.describe(chef)
        multiplier = tier_info.multiplier
        percent = min(request.payout_percent * multiplier, 100.0)
        payout_cents = split_amount(total, percent)

        assignment = await self.repos.chef_assignments.create(
            BookingChef(
                booking_id=booking.id,
                chef_id=chef.id,
                status=ChefAssignmentStatus.assigned.value,
                payout_percent=round(percent, 2),
                payout_amount_cents=payout_cents,
                platform_fee_cents=total - payout_cents,
                payout_status=PayoutStatus.pending.value,
                notes=request.notes,
            )
        )

        booking.assigned_chef_id = chef.id
        booking.chef_payout_amount_cents = payout_cents
        booking.chef_payout_status = PayoutStatus.pending.value
        await self.repos.bookings.update(booking)

        logger.info(
            f"Assigned chef {chef.id} to booking {booking_id}: {percent:.2f}% "
            f"(tier {tier_info.tier.value}, x{multiplier}) = {payout_cents} cents"
        )
        return AssignChefResponse(
            assignment=ChefAssignmentRead.model_validate(assignment),
            tier_multiplier=multiplier,
        )

    async def assign_farmer(self, booking_id: str, request: AssignFarmerRequest) -> AssignFarmerResponse:
        booking = await self._booking(booking_id)
        total = booking.quote_total_cents or 0
        if total <= 0:
            raise ValidationFailedError("Booking must have a quote before assigning farmers")

        farmer = await self.repos.farmers.get_by_id(request.farmer_id)
        if farmer is None:
            raise NotFoundError("Farmer", request.farmer_id)
        if farmer.status != FarmerStatus.approved.value:
            raise ValidationFailedError(f"Farmer must be approved (current status: {farmer.status})")

        role = request.role.value
        if await self.repos.farmer_assignments.find(booking_id, farmer.id, role):
            raise ConflictError(f"Farmer is already assigned to this booking as {role}")

        assignment = await self.repos.farmer_assignments.create(
            BookingFarmer(
                booking_id=booking_id,
                farmer_id=farmer.id,
                role=role,
                payout_percent=request.payout_percent,
                payout_amount_cents=split_amount(total, request.payout_percent),
                payout_status=PayoutStatus.pending.value,
                notes=request.notes,
            )
        )
        logger.info(f"Assigned farmer {farmer.id} to booking {booking_id} as {role}")
        return AssignFarmerResponse(assignment=FarmerAssignmentRead.model_validate(assignment))

    async def create_ingredient_orders(
        self, booking_id: str, request: IngredientOrdersRequest
    ) -> IngredientOrdersResponse:
        """
        Place ingredient orders with farmers for a booking.

        Lines that cannot be ordered are skipped and reported in ``errors``;
        the rest are still created. An ingredient is ordered from a given
        farmer at most once per booking.
        """
        await self._booking(booking_id)
        created: List[BookingIngredientRead] = []
        errors: List[str] = []

        for line in request.orders:
            ingredient = await self.repos.ingredients.get_by_id(line.ingredient_id)
            if ingredient is None:
                errors.append(f"Ingredient {line.ingredient_id} not found")
                continue
            farmer = await self.repos.farmers.get_by_id(line.farmer_id)
            if farmer is None:
                errors.append(f"Farmer {line.farmer_id} not found")
                continue
            if farmer.status != FarmerStatus.approved.value:
                errors.append(f"{farmer.name} is not an approved farmer")
                continue
            if await self.repos.booking_ingredients.find_order(booking_id, ingredient.id, farmer.id):
                errors.append(f"{ingredient.name} already ordered from {farmer.name}")
                continue

            order = await self.repos.booking_ingredients.create(
                BookingIngredient(
                    booking_id=booking_id,
                    ingredient_id=ingredient.id,
                    farmer_id=farmer.id,
                    quantity=line.quantity,
                    total_cents=math.floor(line.quantity * line.price_cents + 0.5),
                    fulfillment_status=FulfillmentStatus.pending.value,
                    payout_status=PayoutStatus.pending.value,
                )
            )
            created.append(BookingIngredientRead.model_validate(order))

        logger.info(f"Booking {booking_id}: {len(created)} ingredient orders created, {len(errors)} skipped")
        return IngredientOrdersResponse(orders_created=len(created), orders=created, errors=errors)

    # ------------------------------------------------------------------
    # Completion and payout hold
    # ------------------------------------------------------------------

    async def confirm_completion(self, booking_id: str) -> ActionResponse:
        booking = await self._booking(booking_id)
        if booking.is_job_completed:
            return ActionResponse(message="Job already completed")

        now = utc_now()
        booking.job_completed_at = now
        booking.job_completed_by = "admin"
        await self.repos.bookings.update(booking)

        assignment = await self.repos.chef_assignments.get_by_booking(booking_id)
        if assignment is not None:
            assignment.status = ChefAssignmentStatus.completed.value
            assignment.completed_at = now
            await self.repos.chef_assignments.update(assignment)

        logger.info(f"Booking {booking_id} marked completed")
        return ActionResponse(message="Job marked as completed")

    async def _set_chef_payout_status(self, booking: BookingInquiry, status: PayoutStatus) -> None:
        """Move the chef payout to ``status`` unless it was already paid."""
        assignment = await self.repos.chef_assignments.get_by_booking(booking.id)
        if assignment is not None and assignment.payout_status != PayoutStatus.paid.value:
            assignment.payout_status = status.value
            await self.repos.chef_assignments.update(assignment)
        if booking.chef_payout_status != PayoutStatus.paid.value:
            booking.chef_payout_status = status.value

    async def set_payout_hold(self, booking_id: str, hold: object, reason: Optional[str] = None) -> ActionResponse:
        if not isinstance(hold, bool):
            raise ValidationFailedError("hold must be a boolean")
        booking = await self._booking(booking_id)

        if hold:
            booking.payout_hold = True
            booking.payout_hold_reason = reason
            await self._set_chef_payout_status(booking, PayoutStatus.on_hold)
            message = "Payout put on hold"
        else:
            booking.payout_hold = False
            booking.payout_hold_reason = None
            await self._set_chef_payout_status(booking, PayoutStatus.pending)
            message = "Payout hold released"

        await self.repos.bookings.update(booking)
        logger.info(f"Booking {booking_id}: {message.lower()}")
        return ActionResponse(message=message)

    async def release_payout(self, booking_id: str) -> ReleasePayoutResponse:
        """Release a held payout and, when the booking is ready, pay the chef immediately."""
        booking = await self._booking(booking_id)
        booking.payout_hold = False
        booking.payout_hold_reason = None
        booking.payout_released_at = utc_now()
        await self._set_chef_payout_status(booking, PayoutStatus.pending)
        booking = await self.repos.bookings.update(booking)

        if not (booking.is_fully_paid and booking.is_job_completed):
            return ReleasePayoutResponse(message="Payout hold released")

        result = await self.payouts.try_chef_payout(booking_id)
        if result.payout_created:
            message = "Payout released and processed"
        elif result.blockers:
            message = "Payout hold released, but payout blocked"
        else:
            message = "Payout hold released"
        return ReleasePayoutResponse(message=message, payout=result)

    # ------------------------------------------------------------------
    # Manual payout triggers
    # ------------------------------------------------------------------

    async def run_payout(self, booking_id: str) -> RunPayoutResponse:
        await self._booking(booking_id)
        result = await self.payouts.try_chef_payout(booking_id)
        if not result.success:
            raise ExternalServiceError(result.error or "Failed to process payout")
        if result.blockers:
            return RunPayoutResponse(
                blockers=result.blockers, message="Payout cannot be processed due to blockers"
            )
        if result.payout_created:
            return RunPayoutResponse(
                payout_created=True,
                payout_id=result.payout_id,
                transfer_id=result.transfer_id,
                message="Payout processed successfully",
            )
        return RunPayoutResponse(
            payout_id=result.payout_id,
            transfer_id=result.transfer_id,
            message="Payout already exists or not eligible",
        )

    async def run_farmer_payouts(self, booking_id: str) -> FarmerPayoutsResponse:
        await self._booking(booking_id)
        farmer_results = await self.payouts.try_farmer_payouts(booking_id)
        ingredient_results = await self.payouts.try_ingredient_payouts(booking_id)
        return FarmerPayoutsResponse(farmer_payouts=farmer_results, ingredient_payouts=ingredient_results)

    async def recommended_chefs(self, booking_id: str) -> ChefRecommendationsResponse:
        booking = await self._booking(booking_id)
        return await self.optimizer.recommend_for_booking(booking)
