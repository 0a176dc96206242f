"""
Chef Endpoints.

Public chef applications, plus admin approval, payout onboarding, and views
of a chef's tier, availability, ingredient needs and farmer matches.
"""

from __future__ import annotations

from datetime import date
from typing import List

from fastapi import APIRouter, status

from bornfidis_provisions.core.errors import NotFoundError
from bornfidis_provisions.core.logging_config import get_logger
from bornfidis_provisions.core.models.io.chefs import (
    AvailabilityRead,
    AvailabilityUpdate,
    ChefApplicationCreate,
    ChefApplicationResponse,
    ChefApprovalResponse,
    ChefNeedCreate,
    ChefNeedRead,
    ChefTierRead,
)
from bornfidis_provisions.core.models.io.common import OnboardingLinkResponse, PayoutAccountRead
from bornfidis_provisions.core.models.io.farmers import NeedMatches
from bornfidis_provisions.server.core.security import AdminUserDep
from bornfidis_provisions.server.services.deps import (
    ChefTierServiceDep,
    IntakeServiceDep,
    MatchingServiceDep,
    OnboardingServiceDep,
    ReposDep,
)

logger = get_logger(__name__)

router = APIRouter(tags=["chefs"])


@router.post(
    "/apply",
    response_model=ChefApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Apply as Chef",
    description="Public chef application form. One application per email address.",
    response_description="The id of the new application.",
    responses={
        201: {"description": "Application submitted"},
        400: {"description": "Invalid form data or duplicate email"},
    },
)
async def apply_chef(form: ChefApplicationCreate, intake: IntakeServiceDep) -> ChefApplicationResponse:
    """
    Submit a chef application.

    - **email**: Applicant email; must not have applied before.
    - **name**: Applicant name.
    - **phone**: Contact phone.
    - **bio**: Professional biography (at least 50 characters).
    - **experience_years**: Years of experience (0-50).
    - **specialties** / **certifications**: Free-form lists.
    """
    return await intake.apply_chef(form)


@router.get(
    "/{chef_id}/tier",
    response_model=ChefTierRead,
    summary="Get Chef Tier",
    description="Effective tier of a chef, with the computed tier, any admin override and the on-time rates behind it.",
    response_description="Tier report.",
    responses={404: {"description": "Chef not found"}},
)
async def get_chef_tier(chef_id: str, _admin: AdminUserDep, tiers: ChefTierServiceDep) -> ChefTierRead:
    return await tiers.get_chef_tier(chef_id)


@router.put(
    "/{chef_id}/availability/{day}",
    response_model=AvailabilityRead,
    summary="Set Chef Availability",
    description="Record whether a chef is available on a given day. Days without a record count as available.",
    response_description="The availability record.",
    responses={404: {"description": "Chef not found"}},
)
async def set_availability(
    chef_id: str, day: date, update: AvailabilityUpdate, _admin: AdminUserDep, repos: ReposDep
) -> AvailabilityRead:
    """
    Set availability for one day.

    - **available**: `false` excludes the chef from recommendations for that day.
    - **note**: Optional reason.
    """
    if await repos.chefs.get_by_id(chef_id) is None:
        raise NotFoundError("Chef", chef_id)
    record = await repos.chefs.set_availability(chef_id, day, update.available, update.note)
    logger.info(f"Chef {chef_id} availability on {day}: {update.available}")
    return AvailabilityRead.model_validate(record)


@router.get(
    "/{chef_id}/farmer-matches",
    response_model=List[NeedMatches],
    summary="Match Farmers to Chef Needs",
    description="For each ingredient need of the chef, the best matching approved farmers (top 5).",
    response_description="Matches grouped by need.",
    responses={404: {"description": "Chef not found"}},
)
async def farmer_matches(chef_id: str, _admin: AdminUserDep, matching: MatchingServiceDep) -> List[NeedMatches]:
    return await matching.match_farmers_for_chef(chef_id)


@router.post(
    "/applications/{application_id}/approve",
    response_model=ChefApprovalResponse,
    summary="Approve Chef Application",
    description="Create an approved chef from a pending application and start payout account onboarding.",
    response_description="The new chef and, when onboarding started, the onboarding link.",
    responses={
        400: {"description": "Application already reviewed, or a chef with this email exists"},
        404: {"description": "Application not found"},
    },
)
async def approve_application(
    application_id: str, admin: AdminUserDep, onboarding: OnboardingServiceDep
) -> ChefApprovalResponse:
    """
    Approve a chef application.

    The chef is approved even when the payments provider is unavailable; in that
    case `onboarding_url` is null and onboarding can be started again later.
    """
    logger.info(f"Admin {admin.id} approving chef application {application_id}")
    return await onboarding.approve_chef_application(application_id)


@router.post(
    "/{chef_id}/onboarding",
    response_model=OnboardingLinkResponse,
    summary="Start Chef Payout Onboarding",
    description="Create the chef's payout account if missing and return a fresh onboarding link.",
    response_description="The payout account id and onboarding link.",
    responses={
        404: {"description": "Chef not found"},
        500: {"description": "Payments provider failed"},
    },
)
async def start_onboarding(chef_id: str, _admin: AdminUserDep, onboarding: OnboardingServiceDep) -> OnboardingLinkResponse:
    return await onboarding.start_chef_onboarding(chef_id)


@router.post(
    "/{chef_id}/payout-account/refresh",
    response_model=PayoutAccountRead,
    summary="Refresh Chef Payout Account",
    description="Fetch the payout account status from the payments provider and store it on the chef.",
    response_description="The stored payout account status.",
    responses={
        400: {"description": "Chef has no payout account, or the provider does not know it"},
        404: {"description": "Chef not found"},
    },
)
async def refresh_payout_account(
    chef_id: str, _admin: AdminUserDep, onboarding: OnboardingServiceDep
) -> PayoutAccountRead:
    return await onboarding.refresh_chef_account(chef_id)


@router.post(
    "/{chef_id}/needs",
    response_model=ChefNeedRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Chef Ingredient Need",
    description="Record an ingredient the chef needs sourced. Needs drive farmer matching.",
    response_description="The new need.",
    responses={
        400: {"description": "Invalid crop, quantity, frequency or dates"},
        404: {"description": "Chef not found"},
    },
)
async def add_need(
    chef_id: str, need: ChefNeedCreate, _admin: AdminUserDep, matching: MatchingServiceDep
) -> ChefNeedRead:
    """
    Add an ingredient need.

    - **crop**: Crop name.
    - **quantity**: Positive amount per delivery.
    - **frequency**: `weekly`, `biweekly`, `monthly` or `custom`.
    - **start_date**: Today or later.
    - **end_date**: Optional; after `start_date`.
    """
    return await matching.add_need(chef_id, need)


@router.get(
    "/{chef_id}/needs",
    response_model=List[ChefNeedRead],
    summary="List Chef Ingredient Needs",
    description="Ingredient needs of a chef, earliest start date first.",
    response_description="The chef's needs.",
    responses={404: {"description": "Chef not found"}},
)
async def list_needs(chef_id: str, _admin: AdminUserDep, matching: MatchingServiceDep) -> List[ChefNeedRead]:
    return await matching.list_needs(chef_id)
