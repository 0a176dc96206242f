"""
Invite Endpoints.

Admins invite people to role-scoped accounts; invitees accept with the
emailed token while signed in with the invited address.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from bornfidis_provisions.core.models.domain import InviteStatusFilter
from bornfidis_provisions.core.models.io.invites import (
    InviteAcceptRequest,
    InviteAcceptResponse,
    InviteCreate,
    InviteListResponse,
    InviteSendResponse,
)
from bornfidis_provisions.server.core.security import AdminUserDep, CurrentUserDep
from bornfidis_provisions.server.services.deps import InviteServiceDep

router = APIRouter(tags=["invites"])


@router.post(
    "",
    response_model=InviteSendResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send Invite",
    description="Create an invite for an email address, or refresh the pending one, and email the link.",
    response_description="The invite, its link and whether the email was sent.",
    responses={
        201: {"description": "Invite created or refreshed"},
        400: {"description": "Invalid email or role, or invite already accepted"},
    },
)
async def create_invite(request: InviteCreate, admin: AdminUserDep, invites: InviteServiceDep) -> InviteSendResponse:
    """
    Invite a user.

    - **email**: Invitee email; lowercased.
    - **role**: `FARMER`, `CHEF`, `EDUCATOR` or `PARTNER`.

    A failed email does not fail the request; check **email_sent**.
    """
    return await invites.create_invite(request.email, request.role, invited_by=admin.id)


@router.get(
    "",
    response_model=InviteListResponse,
    summary="List Invites",
    description="List invites, newest first, filtered by state.",
    response_description="Invites and their count.",
)
async def list_invites(
    _admin: AdminUserDep,
    invites: InviteServiceDep,
    invite_status: InviteStatusFilter = Query(default=InviteStatusFilter.all, alias="status"),
) -> InviteListResponse:
    return await invites.list_invites(invite_status)


@router.post(
    "/accept",
    response_model=InviteAcceptResponse,
    summary="Accept Invite",
    description="Accept an invite as the signed-in user. The user's email must match the invite.",
    response_description="The role granted.",
    responses={
        400: {"description": "Different email, already accepted, or expired"},
        401: {"description": "Not signed in"},
        404: {"description": "Unknown token"},
    },
)
async def accept_invite(
    request: InviteAcceptRequest, user: CurrentUserDep, invites: InviteServiceDep
) -> InviteAcceptResponse:
    return await invites.accept_invite(request.token, user.id, user.email)


@router.post(
    "/{invite_id}/resend",
    response_model=InviteSendResponse,
    summary="Resend Invite",
    description="Issue a fresh token and expiry for a pending invite and email it again.",
    response_description="The refreshed invite.",
    responses={
        400: {"description": "Invite already accepted"},
        404: {"description": "Invite not found"},
        500: {"description": "Invite email could not be sent"},
    },
)
async def resend_invite(invite_id: str, _admin: AdminUserDep, invites: InviteServiceDep) -> InviteSendResponse:
    return await invites.resend_invite(invite_id)
