"""
Booking Endpoints.

The public booking inquiry form plus the admin workflow that follows it:
quoting, chef and farmer assignment, ingredient orders, completion, payout
hold and manual payout runs. Everything except the inquiry form requires an admin token.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from bornfidis_provisions.core.logging_config import get_logger
from bornfidis_provisions.core.models.io.bookings import (
    AssignChefRequest,
    AssignChefResponse,
    AssignFarmerRequest,
    AssignFarmerResponse,
    BookingQuoteUpdate,
    BookingRead,
    BookingSubmit,
    BookingSubmitResponse,
    FarmerPayoutsResponse,
    IngredientOrdersRequest,
    IngredientOrdersResponse,
    PayoutHoldRequest,
    ReleasePayoutResponse,
    RunPayoutResponse,
)
from bornfidis_provisions.core.models.io.chefs import ChefRecommendationsResponse
from bornfidis_provisions.core.models.io.common import ActionResponse
from bornfidis_provisions.server.core.security import AdminUserDep
from bornfidis_provisions.server.services.deps import BookingAdminServiceDep, IntakeServiceDep

logger = get_logger(__name__)

router = APIRouter(tags=["bookings"])


@router.post(
    "",
    response_model=BookingSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Booking Inquiry",
    description="Public booking form. Stores the inquiry and sends confirmation messages in the background of the request.",
    response_description="The id of the new booking inquiry.",
    responses={
        201: {"description": "Booking inquiry received"},
        400: {"description": "Invalid form data or spam detected"},
    },
)
async def submit_booking(form: BookingSubmit, intake: IntakeServiceDep) -> BookingSubmitResponse:
    """
    Submit a booking inquiry.

    Confirmation email, admin notification and confirmation SMS are best effort;
    a failed message never fails the submission.

    - **name**: Client name (at least 2 characters).
    - **phone**: Client phone number.
    - **event_date**: Event date, today or later.
    - **event_time**: Optional start time as HH:MM.
    - **location**: Event address or venue.
    - **website_url**: Honeypot; leave empty.
    """
    return await intake.submit_booking(form)


@router.get(
    "",
    response_model=List[BookingRead],
    summary="List Bookings",
    description="List booking inquiries, newest first, optionally filtered by status.",
    response_description="A list of bookings.",
)
async def list_bookings(
    _admin: AdminUserDep,
    service: BookingAdminServiceDep,
    booking_status: Optional[str] = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
) -> List[BookingRead]:
    return await service.list_bookings(booking_status, limit, offset)


@router.get(
    "/{booking_id}",
    response_model=BookingRead,
    summary="Get Booking",
    description="Retrieve a booking by id.",
    response_description="The booking.",
    responses={404: {"description": "Booking not found"}},
)
async def get_booking(booking_id: str, _admin: AdminUserDep, service: BookingAdminServiceDep) -> BookingRead:
    return await service.get_booking(booking_id)


@router.put(
    "/{booking_id}/quote",
    response_model=BookingRead,
    summary="Set Booking Quote",
    description="Set the quote total and deposit; the balance is the remainder.",
    response_description="The updated booking.",
    responses={
        400: {"description": "Deposit exceeds the quote"},
        404: {"description": "Booking not found"},
    },
)
async def set_quote(
    booking_id: str, quote: BookingQuoteUpdate, _admin: AdminUserDep, service: BookingAdminServiceDep
) -> BookingRead:
    """
    Quote a booking.

    - **quote_total_cents**: Total price in cents.
    - **deposit_amount_cents**: Deposit in cents; keeps the current deposit when omitted.
    - **status**: Booking status after quoting (default `Quoted`).
    """
    return await service.set_quote(booking_id, quote)


@router.post(
    "/{booking_id}/assign-chef",
    response_model=AssignChefResponse,
    summary="Assign Chef",
    description="Assign a chef to a quoted booking and compute the chef payout split.",
    response_description="The chef assignment and the tier multiplier applied.",
    responses={
        400: {"description": "No quote, chef not assignable, or booking already has a chef"},
        404: {"description": "Booking or chef not found"},
    },
)
async def assign_chef(
    booking_id: str, request: AssignChefRequest, admin: AdminUserDep, service: BookingAdminServiceDep
) -> AssignChefResponse:
    """
    Assign a chef.

    - **chef_id**: Chef to assign; must be `active` or `approved`.
    - **payout_percent**: Share of the quote paid to the chef (default 70). Scaled by the
      chef's tier multiplier when tiered rates are enabled, capped at 100.
    - **notes**: Optional notes.
    """
    logger.info(f"Admin {admin.id} assigning chef {request.chef_id} to booking {booking_id}")
    return await service.assign_chef(booking_id, request)


@router.post(
    "/{booking_id}/assign-farmer",
    response_model=AssignFarmerResponse,
    summary="Assign Farmer",
    description="Assign an approved farmer to a quoted booking in a supply role.",
    response_description="The farmer assignment.",
    responses={
        400: {"description": "Invalid role or percent, no quote, farmer not approved, or duplicate"},
        404: {"description": "Booking or farmer not found"},
    },
)
async def assign_farmer(
    booking_id: str, request: AssignFarmerRequest, _admin: AdminUserDep, service: BookingAdminServiceDep
) -> AssignFarmerResponse:
    """
    Assign a farmer.

    - **farmer_id**: Farmer to assign; must be `approved`.
    - **role**: One of `produce`, `fish`, `meat`, `dairy`, `spice`, `beverage`.
    - **payout_percent**: Share of the quote paid to the farmer (default 60).
    """
    return await service.assign_farmer(booking_id, request)


@router.post(
    "/{booking_id}/ingredients/orders",
    response_model=IngredientOrdersResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Ingredient Orders",
    description="Order ingredients from approved farmers for a booking. Lines that cannot be ordered are reported, not fatal.",
    response_description="The created orders and one message per skipped line.",
    responses={
        400: {"description": "Empty or malformed order list"},
        404: {"description": "Booking not found"},
    },
)
async def create_ingredient_orders(
    booking_id: str, request: IngredientOrdersRequest, _admin: AdminUserDep, service: BookingAdminServiceDep
) -> IngredientOrdersResponse:
    """
    Create ingredient orders.

    - **orders**: One line per ingredient and farmer, with `quantity` and the
      farmer's `price_cents` per unit. The order total is `quantity * price_cents`.
    """
    return await service.create_ingredient_orders(booking_id, request)


@router.post(
    "/{booking_id}/confirm-completion",
    response_model=ActionResponse,
    summary="Confirm Job Completion",
    description="Mark the job as completed by an admin. Repeated calls change nothing.",
    response_description="Confirmation message.",
    responses={404: {"description": "Booking not found"}},
)
async def confirm_completion(booking_id: str, _admin: AdminUserDep, service: BookingAdminServiceDep) -> ActionResponse:
    return await service.confirm_completion(booking_id)


@router.post(
    "/{booking_id}/payout-hold",
    response_model=ActionResponse,
    summary="Hold or Release Chef Payout",
    description="Put the chef payout on hold (with a reason) or release the hold.",
    response_description="Confirmation message.",
    responses={
        400: {"description": "hold is not a boolean"},
        404: {"description": "Booking not found"},
    },
)
async def set_payout_hold(
    booking_id: str, request: PayoutHoldRequest, _admin: AdminUserDep, service: BookingAdminServiceDep
) -> ActionResponse:
    """
    Hold or release a payout.

    - **hold**: `true` to hold, `false` to release.
    - **reason**: Why the payout is held.
    """
    return await service.set_payout_hold(booking_id, request.hold, request.reason)


@router.post(
    "/{booking_id}/release-payout",
    response_model=ReleasePayoutResponse,
    summary="Release Payout",
    description="Release a held payout and pay the chef right away when the booking is fully paid and completed.",
    response_description="Outcome message and the payout attempt, if one was made.",
    responses={404: {"description": "Booking not found"}},
)
async def release_payout(
    booking_id: str, _admin: AdminUserDep, service: BookingAdminServiceDep
) -> ReleasePayoutResponse:
    return await service.release_payout(booking_id)


@router.post(
    "/{booking_id}/run-payout",
    response_model=RunPayoutResponse,
    summary="Run Chef Payout",
    description="Run the idempotent chef payout for a booking.",
    response_description="Payout outcome, or the blockers that prevented it.",
    responses={
        404: {"description": "Booking not found"},
        500: {"description": "Payout failed"},
    },
)
async def run_payout(booking_id: str, admin: AdminUserDep, service: BookingAdminServiceDep) -> RunPayoutResponse:
    logger.info(f"Admin {admin.id} triggered chef payout for booking {booking_id}")
    return await service.run_payout(booking_id)


@router.post(
    "/{booking_id}/run-farmer-payouts",
    response_model=FarmerPayoutsResponse,
    summary="Run Farmer Payouts",
    description="Run payouts for every pending farmer assignment and every delivered ingredient order.",
    response_description="One result per assignment and per ingredient order.",
    responses={404: {"description": "Booking not found"}},
)
async def run_farmer_payouts(
    booking_id: str, admin: AdminUserDep, service: BookingAdminServiceDep
) -> FarmerPayoutsResponse:
    logger.info(f"Admin {admin.id} triggered farmer payouts for booking {booking_id}")
    return await service.run_farmer_payouts(booking_id)


@router.get(
    "/{booking_id}/recommended-chefs",
    response_model=ChefRecommendationsResponse,
    summary="Recommend Chefs",
    description="Rank available active or approved chefs for the booking by tier, performance and workload.",
    response_description="Up to three recommendations, best first.",
    responses={404: {"description": "Booking not found"}},
)
async def recommended_chefs(
    booking_id: str, _admin: AdminUserDep, service: BookingAdminServiceDep
) -> ChefRecommendationsResponse:
    return await service.recommended_chefs(booking_id)
