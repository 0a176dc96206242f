"""
Invite I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from bornfidis_provisions.core.models.domain import InviteRole

from .common import Email


class InviteCreate(BaseModel):
    email: Email = Field(description="Invitee email address")
    role: InviteRole


class InviteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    role: str
    invited_by: Optional[str] = None
    expires_at: datetime
    accepted_at: Optional[datetime] = None
    accepted_by: Optional[str] = None
    created_at: datetime


class InviteSendResponse(BaseModel):
    success: bool = True
    invite: InviteRead
    invite_url: str
    email_sent: bool


class InviteListResponse(BaseModel):
    invites: List[InviteRead] = Field(default_factory=list)
    count: int = 0


class InviteAcceptRequest(BaseModel):
    token: str = Field(min_length=1)


class InviteAcceptResponse(BaseModel):
    success: bool = True
    role: str
    message: str = "Invite accepted"
