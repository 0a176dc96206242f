"""
Shared response envelopes and field helpers.
"""

from __future__ import annotations

from typing import Annotated, Any, List, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, EmailStr, Field


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _blank(value: Any) -> Any:
    return blank_to_none(value) if isinstance(value, str) else value


def _lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if value is not None else None


# Stored and compared lowercase; duplicate checks rely on it.
Email = Annotated[EmailStr, BeforeValidator(_strip), AfterValidator(_lower)]
OptionalEmail = Annotated[Optional[EmailStr], BeforeValidator(_blank), AfterValidator(_lower)]


class ActionResponse(BaseModel):
    """Generic success envelope for admin actions."""

    success: bool = True
    message: str


class PayoutResult(BaseModel):
    """Outcome of a single payout attempt."""

    success: bool = Field(description="False only when the attempt errored; blockers are a successful no-op")
    payout_created: bool = False
    reference_id: Optional[str] = Field(default=None, description="Assignment or ingredient order the attempt was for")
    payout_id: Optional[str] = None
    transfer_id: Optional[str] = None
    blockers: List[str] = Field(default_factory=list)
    error: Optional[str] = None
    message: Optional[str] = None


class OnboardingLinkResponse(BaseModel):
    """Link a chef or farmer follows to finish payout account setup."""

    success: bool = True
    account_id: str
    onboarding_url: str


class PayoutAccountRead(BaseModel):
    success: bool = True
    account_id: str
    payout_account_status: str
    payouts_enabled: bool
