"""
Webhook Endpoints.

Signed event deliveries from the payments service.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Header, Request

from bornfidis_provisions.core.logging_config import get_logger
from bornfidis_provisions.core.models.io.webhooks import WebhookAck
from bornfidis_provisions.server.core.config import settings
from bornfidis_provisions.server.services.deps import WebhookServiceDep
from bornfidis_provisions.server.services.webhooks import parse_event, verify_signature

logger = get_logger(__name__)

router = APIRouter(tags=["webhooks"])


@router.post(
    "/payments",
    response_model=WebhookAck,
    summary="Payments Webhook",
    description="Receive a signed payments event. Completed checkouts record deposits and balances; "
    "a paid balance triggers payouts and impact recording.",
    response_description="Acknowledgement.",
    responses={400: {"description": "Missing or invalid signature, or malformed payload"}},
)
async def payments_webhook(
    request: Request,
    webhooks: WebhookServiceDep,
    signature: Optional[str] = Header(default=None, alias="X-Bornfidis-Signature"),
) -> WebhookAck:
    body = await request.body()
    verify_signature(settings.payments.webhook_secret, signature, body)
    event = parse_event(body)
    logger.info(f"Payments event {event.id} ({event.type}) received")
    return await webhooks.handle(event)
