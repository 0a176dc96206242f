"""
Community content repositories: stories and partner inquiries.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.content import PartnerInquiry, Story
from .base import SqlModelRepository


class StoryRepository(SqlModelRepository[Story]):
    default_order = "created_at"
    default_descending = True

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Story)


class PartnerInquiryRepository(SqlModelRepository[PartnerInquiry]):
    default_order = "created_at"
    default_descending = True

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PartnerInquiry)
