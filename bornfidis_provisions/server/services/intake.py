"""
Public intake: booking inquiries, chef applications, farmer join requests,
partner inquiries and community stories.

Submissions are stored first; confirmation messages are sent afterwards and
never fail the submission.
"""

from __future__ import annotations

import asyncio

from bornfidis_provisions.core.database.entities.bookings import BookingInquiry
from bornfidis_provisions.core.database.entities.chefs import ChefApplication
from bornfidis_provisions.core.database.entities.content import PartnerInquiry, Story
from bornfidis_provisions.core.database.entities.farmers import FarmerApplication
from bornfidis_provisions.core.database.repositories import SqlRepoBundle
from bornfidis_provisions.core.errors import ConflictError, ValidationFailedError
from bornfidis_provisions.core.logging_config import get_logger
from bornfidis_provisions.core.models.domain import BookingStatus
from bornfidis_provisions.core.models.io.bookings import BookingSubmit, BookingSubmitResponse
from bornfidis_provisions.core.models.io.chefs import ChefApplicationCreate, ChefApplicationResponse
from bornfidis_provisions.core.models.io.content import (
    PartnerInquiryCreate,
    PartnerInquiryResponse,
    StorySubmit,
    StorySubmitResponse,
)
from bornfidis_provisions.core.models.io.farmers import FarmerJoinRequest, FarmerJoinResponse
from bornfidis_provisions.core.phone import normalize_phone

from .notifications import NotificationService, notify_safely

logger = get_logger(__name__)


class IntakeService:
    def __init__(self, repos: SqlRepoBundle, notifications: NotificationService) -> None:
        self.repos = repos
        self.notifications = notifications

    async def submit_booking(self, form: BookingSubmit) -> BookingSubmitResponse:
        """
        Store a public booking inquiry and send confirmations.

        Raises:
            ValidationFailedError: If the honeypot field was filled in
        """
        if form.website_url and form.website_url.strip():
            logger.warning(f"Spam booking submission rejected (name={form.name!r})")
            raise ValidationFailedError("Spam detected")

        booking = await self.repos.bookings.create(
            BookingInquiry(
                name=form.name,
                email=form.email,
                phone=form.phone,
                event_date=form.event_date,
                event_time=form.event_time,
                location=form.location,
                guests=form.guests,
                budget_range=form.budget_range,
                dietary_restrictions=form.dietary_restrictions,
                notes=form.notes,
                status=BookingStatus.new.value,
            )
        )
        logger.info(f"Booking inquiry {booking.id} received for {form.event_date}")

        event_date = form.event_date.isoformat()
        pending = [
            notify_safely(
                self.notifications.send_admin_booking_notification(booking.id, form.name, event_date),
                f"admin notification for booking {booking.id}",
            )
        ]
        if form.email:
            pending.append(
                notify_safely(
                    self.notifications.send_booking_confirmation_email(form.email, form.name, event_date),
                    f"confirmation email for booking {booking.id}",
                )
            )
        phone = normalize_phone(form.phone)
        if phone.valid and phone.e164:
            pending.append(
                notify_safely(
                    self.notifications.send_submission_confirmation_sms(phone.e164, form.name, "booking"),
                    f"confirmation SMS for booking {booking.id}",
                )
            )
        await asyncio.gather(*pending)

        return BookingSubmitResponse(booking_id=booking.id)

    async def apply_chef(self, form: ChefApplicationCreate) -> ChefApplicationResponse:
        if await self.repos.chef_applications.get_by_email(form.email):
            raise ConflictError("An application with this email already exists.")

        application = ChefApplication(
            email=form.email,
            name=form.name.strip(),
            phone=form.phone.strip(),
            bio=form.bio.strip(),
            experience_years=form.experience_years,
            website_url=form.website_url,
            instagram_handle=form.instagram_handle,
        )
        application.set_specialties_list(form.specialties)
        application.set_certifications_list(form.certifications)
        application = await self.repos.chef_applications.create(application)
        logger.info(f"Chef application {application.id} received")
        return ChefApplicationResponse(application_id=application.id)

    async def join_farmer(self, form: FarmerJoinRequest) -> FarmerJoinResponse:
        """
        Store a farmer join request with a normalised phone number.

        Raises:
            ValidationFailedError: If the phone number cannot be normalised
        """
        phone = normalize_phone(form.phone)
        if not phone.valid or not phone.e164:
            raise ValidationFailedError(phone.error or "Invalid phone number")

        application = FarmerApplication(
            name=form.name.strip(),
            phone=phone.e164,
            parish=form.parish,
            acres=form.acres,
            voice_ready=form.voice_ready,
            language=form.language.value,
            notes=form.notes,
        )
        application.set_crops_list(form.crops)
        application = await self.repos.farmer_applications.create(application)
        logger.info(f"Farmer application {application.id} received (parish={form.parish})")

        await asyncio.gather(
            notify_safely(self.notifications.send_farmer_welcome_sms(phone.e164), f"welcome SMS to {phone.e164}"),
            notify_safely(
                self.notifications.send_new_farmer_alert(
                    application.name, phone.e164, form.parish, form.crops, form.acres
                ),
                "coordinator alert for new farmer",
            ),
        )
        return FarmerJoinResponse(application_id=application.id)

    async def submit_partner_inquiry(self, form: PartnerInquiryCreate) -> PartnerInquiryResponse:
        inquiry = await self.repos.partner_inquiries.create(
            PartnerInquiry(
                organization_name=form.organization_name.strip(),
                contact_name=form.contact_name.strip(),
                contact_email=form.contact_email,
                contact_phone=form.contact_phone,
                organization_type=form.organization_type.value,
                partnership_interest=form.partnership_interest.value,
                message=form.message.strip(),
                website_url=form.website_url,
            )
        )
        logger.info(f"Partner inquiry {inquiry.id} received from {inquiry.organization_name}")
        return PartnerInquiryResponse(inquiry_id=inquiry.id)

    async def submit_story(self, form: StorySubmit) -> StorySubmitResponse:
        story = await self.repos.stories.create(
            Story(
                title=form.title.strip(),
                author_name=form.author_name.strip(),
                author_email=form.author_email,
                author_role=form.author_role,
                author_region=form.author_region,
                story_text=form.story_text.strip(),
                video_url=form.video_url,
                image_url=form.image_url,
                category=form.category.value,
            )
        )
        logger.info(f"Story {story.id} submitted for review")
        return StorySubmitResponse(story_id=story.id)
