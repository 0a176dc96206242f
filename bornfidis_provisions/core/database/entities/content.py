"""
Community content entity models: stories and partner inquiries.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now


class Story(Base, table=True):
    """A community story awaiting (or past) moderation.

    Table: stories
    """

    __tablename__ = "stories"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    title: str = Field(max_length=255)
    author_name: str = Field(max_length=255)
    author_email: Optional[str] = Field(default=None, max_length=255)
    author_role: Optional[str] = Field(default=None, max_length=64)
    author_region: Optional[str] = Field(default=None, max_length=64)
    story_text: str = Field(sa_type=Text)
    video_url: Optional[str] = Field(default=None, max_length=512)
    image_url: Optional[str] = Field(default=None, max_length=512)
    category: str = Field(default="testimony", max_length=16, index=True)
    is_approved: bool = Field(default=False)
    is_public: bool = Field(default=False)
    is_featured: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, index=True)


class PartnerInquiry(Base, table=True):
    """An organization's partnership inquiry.

    Table: partner_inquiries
    """

    __tablename__ = "partner_inquiries"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    organization_name: str = Field(max_length=255)
    contact_name: str = Field(max_length=255)
    contact_email: str = Field(max_length=255)
    contact_phone: Optional[str] = Field(default=None, max_length=32)
    organization_type: str = Field(max_length=32)
    partnership_interest: str = Field(max_length=32)
    message: str = Field(sa_type=Text)
    website_url: Optional[str] = Field(default=None, max_length=512)
    status: str = Field(default="submitted", max_length=16, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)
