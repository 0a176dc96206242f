"""
Community content I/O models: stories and partner inquiries.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from bornfidis_provisions.core.models.domain import OrganizationType, PartnershipInterest, StoryCategory

from .common import Email, OptionalEmail, blank_to_none


class StorySubmit(BaseModel):
    title: str = Field(min_length=2, max_length=255)
    author_name: str = Field(min_length=2, max_length=255)
    author_email: OptionalEmail = None
    author_role: Optional[str] = Field(default=None, max_length=64)
    author_region: Optional[str] = Field(default=None, max_length=64)
    story_text: str = Field(min_length=50)
    video_url: Optional[str] = None
    image_url: Optional[str] = None
    category: StoryCategory = StoryCategory.testimony

    @field_validator("video_url", "image_url", "author_role", "author_region")
    @classmethod
    def _blank(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class StorySubmitResponse(BaseModel):
    success: bool = True
    story_id: str
    message: str = "Story submitted for review"


class PartnerInquiryCreate(BaseModel):
    organization_name: str = Field(min_length=2, max_length=255)
    contact_name: str = Field(min_length=2, max_length=255)
    contact_email: Email
    contact_phone: Optional[str] = None
    organization_type: OrganizationType
    partnership_interest: PartnershipInterest
    message: str = Field(min_length=20)
    website_url: Optional[str] = None

    @field_validator("contact_phone", "website_url")
    @classmethod
    def _blank(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class PartnerInquiryResponse(BaseModel):
    success: bool = True
    inquiry_id: str
    message: str = "Partnership inquiry received"
