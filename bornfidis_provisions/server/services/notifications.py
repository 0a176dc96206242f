"""
Outbound notifications (SMS and email).

Notifications are side effects: a failed SMS or email must never fail the
request that triggered it. Callers that do not care about the outcome wrap
the call in ``notify_safely``; callers that do (e.g. invite resend) await the
method directly and inspect the returned flag.
"""

from __future__ import annotations

import asyncio
import html
from typing import Awaitable, List, Optional

from bornfidis_provisions.core.clients import MessagingApiError, MessagingClient
from bornfidis_provisions.core.logging_config import get_logger

logger = get_logger(__name__)

SUBMISSION_SMS_TEMPLATE = (
    "Hi {name}, we've received your {submission_type} submission. "
    "A Bornfidis coordinator will reach out within 48 hours. Blessings, Bornfidis 🌱"
)

FARMER_WELCOME_SMS = (
    "Bornfidis Portland: Thank you for joining our farmer network. "
    "We will call you soon to connect your farm to chefs and markets. 🇯🇲🌱"
)


async def notify_safely(awaitable: Awaitable[bool], description: str) -> bool:
    """Await a notification, logging instead of raising on failure."""
    try:
        return bool(await awaitable)
    except Exception as e:
        logger.warning(f"Notification failed ({description}): {e}")
        return False


class NotificationService:
    """SMS and email delivery with SMS retry/backoff."""

    def __init__(
        self,
        client: MessagingClient,
        *,
        admin_email: Optional[str] = None,
        coordinator_phone: Optional[str] = None,
        sms_max_attempts: int = 3,
        backoff_initial: float = 1.0,
        backoff_factor: float = 2.0,
        backoff_max: float = 8.0,
    ) -> None:
        self.client = client
        self.admin_email = admin_email
        self.coordinator_phone = coordinator_phone
        self.sms_max_attempts = max(1, sms_max_attempts)
        self.backoff_initial = backoff_initial
        self.backoff_factor = backoff_factor
        self.backoff_max = backoff_max

    async def send_sms(self, to: str, body: str) -> bool:
        """
        Send an SMS, retrying transient failures with exponential backoff.

        Client errors (4xx) are not retried.

        Args:
            to: Recipient phone in E.164 format
            body: Message text

        Returns:
            True when the messaging service accepted the message
        """
        if not self.client.configured:
            logger.info(f"Messaging not configured; skipping SMS to {to}")
            return False

        for attempt in range(self.sms_max_attempts):
            try:
                await self.client.send_sms(to, body)
                logger.debug(f"SMS sent to {to} on attempt {attempt + 1}")
                return True
            except MessagingApiError as e:
                retryable = e.status_code is None or e.status_code >= 500 or e.status_code == 429
                if not retryable or attempt == self.sms_max_attempts - 1:
                    logger.warning(f"SMS to {to} failed after {attempt + 1} attempt(s): {e}")
                    return False
                sleep_s = min(self.backoff_initial * (self.backoff_factor**attempt), self.backoff_max)
                logger.debug(f"SMS to {to} failed (attempt {attempt + 1}), retrying in {sleep_s:.1f}s")
                await asyncio.sleep(sleep_s)
        return False

    async def send_email(self, to: str, subject: str, html_body: str) -> bool:
        if not self.client.configured:
            logger.info(f"Messaging not configured; skipping email to {to}")
            return False
        try:
            await self.client.send_email(to, subject, html_body)
        except MessagingApiError as e:
            logger.warning(f"Email to {to} failed: {e}")
            return False
        return True

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    async def send_submission_confirmation_sms(self, phone: str, name: str, submission_type: str) -> bool:
        body = SUBMISSION_SMS_TEMPLATE.format(name=name, submission_type=submission_type)
        return await self.send_sms(phone, body)

    async def send_farmer_welcome_sms(self, phone: str) -> bool:
        return await self.send_sms(phone, FARMER_WELCOME_SMS)

    async def send_new_farmer_alert(
        self, name: str, phone: str, parish: Optional[str], crops: List[str], acres: Optional[float]
    ) -> bool:
        body = (
            f"New farmer: {name} ({phone}). Parish: {parish or '-'}. "
            f"Crops: {', '.join(crops) or '-'}. Acres: {acres if acres is not None else '-'}"
        )
        return await self.send_coordinator_alert(body)

    async def send_booking_confirmation_email(self, to: str, name: str, event_date: str) -> bool:
        subject = "We received your Bornfidis booking inquiry"
        body = (
            f"<p>Hi {html.escape(name)},</p>"
            f"<p>Thank you for your inquiry for {html.escape(event_date)}. "
            "A Bornfidis coordinator will reach out within 48 hours.</p>"
            "<p>Blessings,<br/>Bornfidis Provisions</p>"
        )
        return await self.send_email(to, subject, body)

    async def send_admin_booking_notification(self, booking_id: str, name: str, event_date: str) -> bool:
        if not self.admin_email:
            logger.debug("ADMIN_EMAIL not set; skipping admin booking notification")
            return False
        subject = f"New booking inquiry: {name}"
        body = (
            f"<p>New booking inquiry from <strong>{html.escape(name)}</strong> "
            f"for {html.escape(event_date)}.</p><p>Booking ID: {html.escape(booking_id)}</p>"
        )
        return await self.send_email(self.admin_email, subject, body)

    async def send_coordinator_alert(self, body: str) -> bool:
        if not self.coordinator_phone:
            logger.debug("COORDINATOR_PHONE not set; skipping coordinator alert")
            return False
        return await self.send_sms(self.coordinator_phone, body)

    async def send_invite_email(self, to: str, role: str, invite_url: str) -> bool:
        subject = "You're invited to join Bornfidis Provisions"
        body = (
            f"<p>You have been invited to join Bornfidis Provisions as a <strong>{html.escape(role.title())}</strong>.</p>"
            f'<p><a href="{html.escape(invite_url)}">Accept your invite</a></p>'
            "<p>This invite expires in 7 days.</p>"
        )
        return await self.send_email(to, subject, body)
