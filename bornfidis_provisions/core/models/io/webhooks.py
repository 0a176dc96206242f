"""
Payments webhook I/O models.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class PaymentEventData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    amount_total: Optional[int] = None
    metadata: Dict[str, str] = Field(default_factory=dict)


class PaymentEvent(BaseModel):
    """Event delivered by the payments service webhook."""

    model_config = ConfigDict(extra="ignore")

    id: str
    type: str
    data: PaymentEventData = Field(default_factory=PaymentEventData)


class WebhookAck(BaseModel):
    received: bool = True
    handled: bool = False
    detail: Optional[Dict[str, Any]] = None
