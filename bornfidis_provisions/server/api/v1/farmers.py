"""
Farmer Endpoints.

The public farmer join form, rate limited per client IP because it triggers
outbound SMS, plus admin approval and payout onboarding of farmers.
"""

from fastapi import APIRouter, Request, status

from bornfidis_provisions.core.logging_config import get_logger
from bornfidis_provisions.core.models.io.common import OnboardingLinkResponse, PayoutAccountRead
from bornfidis_provisions.core.models.io.farmers import (
    FarmerApprovalRequest,
    FarmerApprovalResponse,
    FarmerJoinRequest,
    FarmerJoinResponse,
)
from bornfidis_provisions.server.core.rate_limit import FARMER_JOIN_LIMIT, limiter
from bornfidis_provisions.server.core.security import AdminUserDep
from bornfidis_provisions.server.services.deps import IntakeServiceDep, OnboardingServiceDep

logger = get_logger(__name__)

router = APIRouter(tags=["farmers"])


@router.post(
    "/join",
    response_model=FarmerJoinResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Join Farmer Network",
    description="Public farmer join form. The phone number is normalised to E.164 before it is stored.",
    response_description="The id of the new farmer application.",
    responses={
        201: {"description": "Application submitted"},
        400: {"description": "Invalid form data or phone number"},
        429: {"description": "Too many submissions from this client"},
    },
)
@limiter.limit(FARMER_JOIN_LIMIT)
async def join_farmer(request: Request, form: FarmerJoinRequest, intake: IntakeServiceDep) -> FarmerJoinResponse:
    """
    Submit a farmer join request.

    A welcome SMS goes to the farmer and an alert SMS to the coordinator; neither
    failing affects the response.

    - **name**: Farmer name.
    - **phone**: Phone as typed, e.g. `876-555-1234`.
    - **parish**: Parish of the farm.
    - **acres**: Farm size (number or numeric string).
    - **crops**: Crops grown.
    - **voice_ready**: Whether the farmer prefers voice calls.
    - **language**: `en` or `pat`.
    """
    return await intake.join_farmer(form)


@router.post(
    "/applications/{application_id}/approve",
    response_model=FarmerApprovalResponse,
    summary="Approve Farmer Application",
    description="Create an approved farmer, with its crops, from a join-form application.",
    response_description="The new farmer and, when onboarding started, the onboarding link.",
    responses={
        400: {"description": "Application already reviewed or invalid email"},
        404: {"description": "Application not found"},
    },
)
async def approve_application(
    application_id: str, request: FarmerApprovalRequest, admin: AdminUserDep, onboarding: OnboardingServiceDep
) -> FarmerApprovalResponse:
    """
    Approve a farmer application.

    - **email**: Optional farmer email. The join form has none; payout onboarding
      starts only when one is given.
    """
    logger.info(f"Admin {admin.id} approving farmer application {application_id}")
    return await onboarding.approve_farmer_application(application_id, request.email)


@router.post(
    "/{farmer_id}/onboarding",
    response_model=OnboardingLinkResponse,
    summary="Start Farmer Payout Onboarding",
    description="Create the farmer's payout account if missing and return a fresh onboarding link.",
    response_description="The payout account id and onboarding link.",
    responses={
        400: {"description": "Farmer has no email"},
        404: {"description": "Farmer not found"},
        500: {"description": "Payments provider failed"},
    },
)
async def start_onboarding(
    farmer_id: str, _admin: AdminUserDep, onboarding: OnboardingServiceDep
) -> OnboardingLinkResponse:
    return await onboarding.start_farmer_onboarding(farmer_id)


@router.post(
    "/{farmer_id}/payout-account/refresh",
    response_model=PayoutAccountRead,
    summary="Refresh Farmer Payout Account",
    description="Fetch the payout account status from the payments provider and store it on the farmer.",
    response_description="The stored payout account status.",
    responses={
        400: {"description": "Farmer has no payout account, or the provider does not know it"},
        404: {"description": "Farmer not found"},
    },
)
async def refresh_payout_account(
    farmer_id: str, _admin: AdminUserDep, onboarding: OnboardingServiceDep
) -> PayoutAccountRead:
    return await onboarding.refresh_farmer_account(farmer_id)
