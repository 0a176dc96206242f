"""
Invite entity model.

Invites grant a new user a role-scoped account. An email address has at
most one invite; re-inviting refreshes its token and expiry.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class Invite(Base, table=True):
    """Entity for role-scoped account invites.

    Table: invites
    """

    __tablename__ = "invites"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    email: str = Field(max_length=255, unique=True, index=True)
    role: str = Field(max_length=16)
    token: str = Field(max_length=64, unique=True, index=True)
    invited_by: Optional[str] = Field(default=None, max_length=64)
    expires_at: datetime
    accepted_at: Optional[datetime] = Field(default=None)
    accepted_by: Optional[str] = Field(default=None, max_length=64)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at < now

    def __repr__(self) -> str:
        return f"Invite(id={self.id}, email={self.email}, role={self.role})"
