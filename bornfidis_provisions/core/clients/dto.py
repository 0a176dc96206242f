"""
Wire DTOs for the payments and messaging REST APIs.

Only the fields this project reads are declared; unknown fields are ignored.
"""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Wire(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AccountDTO(_Wire):
    """Connected payout account as returned by ``GET /accounts/{id}``."""

    id: str
    charges_enabled: bool = False
    payouts_enabled: bool = False
    details_submitted: bool = False
    email: Optional[str] = None


class AccountLinkDTO(_Wire):
    url: str
    expires_at: Optional[int] = None


class TransferRequestDTO(_Wire):
    amount: int = Field(gt=0, description="Amount in the smallest currency unit (cents)")
    currency: str
    destination: str
    description: Optional[str] = None
    metadata: Dict[str, str] = Field(default_factory=dict)


class TransferDTO(_Wire):
    id: str
    amount: Optional[int] = None
    destination: Optional[str] = None
    status: Optional[str] = None


class SmsRequestDTO(_Wire):
    to: str
    body: str
    sender: Optional[str] = Field(default=None, alias="from")


class EmailRequestDTO(_Wire):
    to: str
    subject: str
    html: str
    sender: str = Field(alias="from")


class MessageDTO(_Wire):
    id: Optional[str] = None
    status: Optional[str] = None
