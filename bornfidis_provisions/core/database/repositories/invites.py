"""
Invites repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.invites import Invite
from .base import SqlModelRepository


class InviteRepository(SqlModelRepository[Invite]):
    """Repository for invite data access operations."""

    default_order = "created_at"
    default_descending = True

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Invite)

    async def get_by_email(self, email: str) -> Optional[Invite]:
        return await self._first(select(Invite).where(Invite.email == email))

    async def get_by_token(self, token: str) -> Optional[Invite]:
        return await self._first(select(Invite).where(Invite.token == token))

    async def list_by_status(self, status: str, now: datetime) -> List[Invite]:
        """List invites by derived status.

        Args:
            status: ``pending``, ``accepted``, ``expired`` or ``all``
            now: Reference time for expiry

        Returns:
            Invites, newest first
        """
        stmt = select(Invite).order_by(Invite.created_at.desc())  # type: ignore
        if status == "accepted":
            stmt = stmt.where(Invite.accepted_at.is_not(None))  # type: ignore
        elif status == "pending":
            stmt = stmt.where(Invite.accepted_at.is_(None) & (Invite.expires_at >= now))  # type: ignore
        elif status == "expired":
            stmt = stmt.where(Invite.accepted_at.is_(None) & (Invite.expires_at < now))  # type: ignore
        return await self._all(stmt)
