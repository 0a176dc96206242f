"""
Role-scoped invites.

Admins invite farmers, chefs, educators and partners by email. Each email
has at most one invite; re-inviting or resending refreshes its token and
seven-day expiry. Invitees accept with the token while signed in with the
invited email address.
"""

from __future__ import annotations

import uuid
from datetime import timedelta
from typing import Tuple
from urllib.parse import urlencode

from bornfidis_provisions.core.database.base import utc_now
from bornfidis_provisions.core.database.entities.invites import Invite
from bornfidis_provisions.core.database.repositories import SqlRepoBundle
from bornfidis_provisions.core.errors import ConflictError, ExternalServiceError, NotFoundError, ValidationFailedError
from bornfidis_provisions.core.logging_config import get_logger
from bornfidis_provisions.core.models.domain import InviteRole, InviteStatusFilter
from bornfidis_provisions.core.models.io.invites import (
    InviteAcceptResponse,
    InviteListResponse,
    InviteRead,
    InviteSendResponse,
)

from .notifications import NotificationService, notify_safely

logger = get_logger(__name__)

INVITE_TTL = timedelta(days=7)


def new_token() -> str:
    return str(uuid.uuid4())


class InviteService:
    def __init__(self, repos: SqlRepoBundle, notifications: NotificationService, *, app_base_url: str) -> None:
        self.repos = repos
        self.notifications = notifications
        self.app_base_url = app_base_url.rstrip("/")

    def invite_url(self, invite: Invite) -> str:
        query = urlencode({"role": invite.role, "token": invite.token})
        return f"{self.app_base_url}/invite?{query}"

    async def _send(self, invite: Invite) -> Tuple[str, bool]:
        url = self.invite_url(invite)
        sent = await notify_safely(
            self.notifications.send_invite_email(invite.email, invite.role, url), f"invite email to {invite.email}"
        )
        return url, sent

    async def create_invite(self, email: str, role: InviteRole, invited_by: str) -> InviteSendResponse:
        """
        Create or refresh the invite for an email address and send it.

        Args:
            email: Invitee email (already normalised to lowercase)
            role: Role granted on acceptance
            invited_by: Id of the admin sending the invite

        Returns:
            The invite, its link and whether the email was sent

        Raises:
            ConflictError: If the email already accepted an invite
        """
        now = utc_now()
        invite = await self.repos.invites.get_by_email(email)
        if invite is not None:
            if invite.accepted_at is not None:
                raise ConflictError("An invite for this email was already accepted")
            invite.role = role.value
            invite.token = new_token()
            invite.expires_at = now + INVITE_TTL
            invite.invited_by = invited_by
            invite = await self.repos.invites.update(invite)
            logger.info(f"Refreshed invite {invite.id} for {email}")
        else:
            invite = await self.repos.invites.create(
                Invite(
                    email=email,
                    role=role.value,
                    token=new_token(),
                    invited_by=invited_by,
                    expires_at=now + INVITE_TTL,
                )
            )
            logger.info(f"Created invite {invite.id} for {email} as {role.value}")

        url, sent = await self._send(invite)
        return InviteSendResponse(invite=InviteRead.model_validate(invite), invite_url=url, email_sent=sent)

    async def list_invites(self, status: InviteStatusFilter = InviteStatusFilter.all) -> InviteListResponse:
        invites = await self.repos.invites.list_by_status(status.value, utc_now())
        return InviteListResponse(invites=[InviteRead.model_validate(i) for i in invites], count=len(invites))

    async def resend_invite(self, invite_id: str) -> InviteSendResponse:
        invite = await self.repos.invites.get_by_id(invite_id)
        if invite is None:
            raise NotFoundError("Invite", invite_id)
        if invite.accepted_at is not None:
            raise ConflictError("Invite already accepted")

        invite.token = new_token()
        invite.expires_at = utc_now() + INVITE_TTL
        invite = await self.repos.invites.update(invite)

        url, sent = await self._send(invite)
        if not sent:
            raise ExternalServiceError("Failed to send invite email")
        return InviteSendResponse(invite=InviteRead.model_validate(invite), invite_url=url, email_sent=True)

    async def accept_invite(self, token: str, user_id: str, user_email: str | None) -> InviteAcceptResponse:
        invite = await self.repos.invites.get_by_token(token)
        if invite is None:
            raise NotFoundError("Invite")
        if not user_email or invite.email != user_email.lower():
            raise ValidationFailedError("This invite was sent to a different email address")
        if invite.accepted_at is not None:
            raise ValidationFailedError("Invite already accepted")
        now = utc_now()
        if invite.is_expired(now):
            raise ValidationFailedError("Invite has expired")

        invite.accepted_at = now
        invite.accepted_by = user_id
        await self.repos.invites.update(invite)
        logger.info(f"Invite {invite.id} accepted by user {user_id}")
        return InviteAcceptResponse(role=invite.role)
