"""
Community Endpoints.

Public story submissions and partnership inquiries.
"""

from __future__ import annotations

from fastapi import APIRouter, status

from bornfidis_provisions.core.models.io.content import (
    PartnerInquiryCreate,
    PartnerInquiryResponse,
    StorySubmit,
    StorySubmitResponse,
)
from bornfidis_provisions.server.services.deps import IntakeServiceDep

router = APIRouter(tags=["community"])


@router.post(
    "/stories",
    response_model=StorySubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Story",
    description="Submit a community story. Stories are stored unapproved and private until moderated.",
    response_description="The id of the new story.",
    responses={400: {"description": "Invalid story"}},
)
async def submit_story(form: StorySubmit, intake: IntakeServiceDep) -> StorySubmitResponse:
    """
    Submit a story.

    - **title** / **author_name**: At least 2 characters.
    - **story_text**: At least 50 characters.
    - **category**: `testimony` (default), `impact`, `farmer`, `chef`, `community` or `partner`.
    """
    return await intake.submit_story(form)


@router.post(
    "/partners/inquiries",
    response_model=PartnerInquiryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Partnership Inquiry",
    description="Organizations interested in partnering with the cooperative.",
    response_description="The id of the new inquiry.",
    responses={400: {"description": "Invalid inquiry"}},
)
async def submit_partner_inquiry(form: PartnerInquiryCreate, intake: IntakeServiceDep) -> PartnerInquiryResponse:
    """
    Submit a partnership inquiry.

    - **organization_type**: `media`, `nonprofit`, `business`, `church`, `government` or `other`.
    - **partnership_interest**: `sponsorship`, `collaboration`, `media`, `distribution` or `other`.
    - **message**: At least 20 characters.
    """
    return await intake.submit_partner_inquiry(form)
