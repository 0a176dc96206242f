"""
Payments webhook processing.

Deliveries are signed with ``X-Bornfidis-Signature: t=<unix ts>,v1=<hex>``
where ``v1`` is HMAC-SHA256 over ``"{t}.{raw body}"`` keyed with the webhook
secret. Only ``checkout.completed`` changes state; every other event type is
acknowledged and ignored.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from typing import Any, Awaitable, Callable, Dict, Optional

from pydantic import ValidationError

from bornfidis_provisions.core.database.base import utc_now
from bornfidis_provisions.core.database.repositories import SqlRepoBundle
from bornfidis_provisions.core.errors import ValidationFailedError
from bornfidis_provisions.core.logging_config import get_logger
from bornfidis_provisions.core.models.domain import BookingStatus
from bornfidis_provisions.core.models.io.webhooks import PaymentEvent, WebhookAck

from .impact import ImpactService
from .payouts import PayoutEngine, describe_result

logger = get_logger(__name__)

SIGNATURE_HEADER = "X-Bornfidis-Signature"
SIGNATURE_TOLERANCE_SECONDS = 300
CHECKOUT_COMPLETED = "checkout.completed"


def compute_signature(secret: str, timestamp: str, body: bytes) -> str:
    signed = f"{timestamp}.".encode() + body
    return hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()


def sign_payload(secret: str, body: bytes, timestamp: Optional[int] = None) -> str:
    """Build a signature header value for ``body``; used by tooling and tests."""
    ts = str(int(time.time()) if timestamp is None else timestamp)
    return f"t={ts},v1={compute_signature(secret, ts, body)}"


def verify_signature(
    secret: Optional[str],
    header: Optional[str],
    body: bytes,
    *,
    tolerance: int = SIGNATURE_TOLERANCE_SECONDS,
    now: Optional[float] = None,
) -> None:
    """
    Check a webhook signature header against the raw request body.

    Raises:
        ValidationFailedError: If the secret is unset, the header is missing or
            malformed, the timestamp is outside the tolerance, or no ``v1``
            signature matches
    """
    if not secret:
        raise ValidationFailedError("Webhook secret not configured")
    if not header:
        raise ValidationFailedError("Missing signature")

    timestamp: Optional[str] = None
    candidates = []
    for part in header.split(","):
        key, _, value = part.strip().partition("=")
        if key == "t":
            timestamp = value
        elif key == "v1":
            candidates.append(value)
    if timestamp is None or not candidates:
        raise ValidationFailedError("Invalid signature")

    if not (timestamp.isascii() and timestamp.isdigit()):
        raise ValidationFailedError("Invalid signature")
    ts = int(timestamp)
    current = time.time() if now is None else now
    if abs(current - ts) > tolerance:
        raise ValidationFailedError("Signature timestamp outside tolerance")

    # Compared as bytes; header values may hold non-ASCII text.
    expected = compute_signature(secret, timestamp, body).encode()
    if not any(hmac.compare_digest(expected, c.encode("utf-8", "surrogateescape")) for c in candidates):
        raise ValidationFailedError("Invalid signature")


def parse_event(body: bytes) -> PaymentEvent:
    try:
        return PaymentEvent.model_validate(json.loads(body))
    except (ValueError, ValidationError) as e:
        raise ValidationFailedError("Invalid webhook payload") from e


class PaymentWebhookService:
    def __init__(self, repos: SqlRepoBundle, payouts: PayoutEngine, impact: ImpactService) -> None:
        self.repos = repos
        self.payouts = payouts
        self.impact = impact

    async def handle(self, event: PaymentEvent) -> WebhookAck:
        if event.type != CHECKOUT_COMPLETED:
            logger.debug(f"Ignoring payments event {event.id} of type {event.type}")
            return WebhookAck()

        metadata = event.data.metadata
        booking_id = metadata.get("booking_id")
        payment_type = metadata.get("payment_type")
        if not booking_id:
            logger.warning(f"Checkout event {event.id} has no booking_id")
            return WebhookAck()

        booking = await self.repos.bookings.get_by_id(booking_id)
        if booking is None:
            logger.warning(f"Checkout event {event.id} references unknown booking {booking_id}")
            return WebhookAck()

        now = utc_now()
        if payment_type == "deposit":
            booking.status = BookingStatus.booked.value
            booking.paid_at = now
            await self.repos.bookings.update(booking)
            logger.info(f"Deposit received for booking {booking_id}")
            return WebhookAck(handled=True)

        if payment_type == "balance":
            booking.balance_paid_at = now
            booking.fully_paid_at = now
            await self.repos.bookings.update(booking)
            logger.info(f"Balance received for booking {booking_id}; booking fully paid")
            detail = await self._after_full_payment(booking_id)
            return WebhookAck(handled=True, detail=detail)

        logger.warning(f"Checkout event {event.id} has unknown payment_type {payment_type!r}")
        return WebhookAck()

    async def _after_full_payment(self, booking_id: str) -> Dict[str, Any]:
        detail: Dict[str, Any] = {}

        async def chef() -> Any:
            return describe_result(await self.payouts.try_chef_payout(booking_id))

        async def farmers() -> Any:
            return [describe_result(r) for r in await self.payouts.try_farmer_payouts(booking_id)]

        async def ingredients() -> Any:
            return [describe_result(r) for r in await self.payouts.try_ingredient_payouts(booking_id)]

        async def impact() -> Any:
            return (await self.impact.record_booking_impact(booking_id)).events_recorded

        hooks: Dict[str, Callable[[], Awaitable[Any]]] = {
            "chef_payout": chef,
            "farmer_payouts": farmers,
            "ingredient_payouts": ingredients,
            "impact_events": impact,
        }
        for name, hook in hooks.items():
            try:
                detail[name] = await hook()
            except Exception as e:
                logger.warning(f"Post-payment step {name} failed for booking {booking_id}: {e}")
                await self.repos.bookings.session.rollback()
                detail[name] = f"error: {e}"
        return detail
