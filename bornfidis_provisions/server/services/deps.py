"""
Service Dependencies.

Outbound clients are process-wide singletons; repositories and services are
built per request around the request's database session.
"""

from typing import Annotated, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bornfidis_provisions.core.clients import MessagingClient, PaymentsClient
from bornfidis_provisions.core.database import get_session
from bornfidis_provisions.core.database.repositories import SqlRepoBundle, build_sql_repos_from_session
from bornfidis_provisions.server.core.config import settings

from .bookings import BookingAdminService
from .chef_optimizer import ChefOptimizer
from .chef_tier import ChefTierService
from .impact import ImpactService
from .intake import IntakeService
from .invites import InviteService
from .matching import FarmerMatchingService
from .notifications import NotificationService
from .onboarding import OnboardingService
from .payouts import PayoutEngine
from .webhooks import PaymentWebhookService

_payments_client: Optional[PaymentsClient] = None
_messaging_client: Optional[MessagingClient] = None


def get_payments_client() -> PaymentsClient:
    global _payments_client
    if _payments_client is None:
        cfg = settings.payments
        _payments_client = PaymentsClient(
            cfg.api_url, api_key=cfg.api_key, currency=cfg.currency, timeout=cfg.timeout
        )
    return _payments_client


def get_messaging_client() -> MessagingClient:
    global _messaging_client
    if _messaging_client is None:
        cfg = settings.messaging
        _messaging_client = MessagingClient(
            cfg.api_url,
            api_key=cfg.api_key,
            sms_from=cfg.sms_from,
            email_from=cfg.email_from,
            timeout=cfg.timeout,
        )
    return _messaging_client


async def close_clients() -> None:
    """Close the shared HTTP clients; called on application shutdown."""
    global _payments_client, _messaging_client
    if _payments_client is not None:
        await _payments_client.aclose()
        _payments_client = None
    if _messaging_client is not None:
        await _messaging_client.aclose()
        _messaging_client = None


PaymentsClientDep = Annotated[PaymentsClient, Depends(get_payments_client)]
MessagingClientDep = Annotated[MessagingClient, Depends(get_messaging_client)]


def get_repos(session: AsyncSession = Depends(get_session)) -> SqlRepoBundle:
    return build_sql_repos_from_session(session=session)


ReposDep = Annotated[SqlRepoBundle, Depends(get_repos)]


def get_notification_service(client: MessagingClientDep) -> NotificationService:
    cfg = settings.messaging
    return NotificationService(
        client,
        admin_email=cfg.admin_email,
        coordinator_phone=cfg.coordinator_phone,
        sms_max_attempts=cfg.sms_max_attempts,
        backoff_initial=cfg.sms_backoff_seconds,
    )


NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]


def get_payout_engine(repos: ReposDep, payments: PaymentsClientDep) -> PayoutEngine:
    return PayoutEngine(repos, payments)


def get_chef_tier_service(repos: ReposDep) -> ChefTierService:
    return ChefTierService(repos, tiered_rates_enabled=settings.features.chef_tiered_rates)


PayoutEngineDep = Annotated[PayoutEngine, Depends(get_payout_engine)]
ChefTierServiceDep = Annotated[ChefTierService, Depends(get_chef_tier_service)]


def get_chef_optimizer(repos: ReposDep, tiers: ChefTierServiceDep) -> ChefOptimizer:
    return ChefOptimizer(repos, tiers)


ChefOptimizerDep = Annotated[ChefOptimizer, Depends(get_chef_optimizer)]


def get_booking_admin_service(
    repos: ReposDep, payouts: PayoutEngineDep, tiers: ChefTierServiceDep, optimizer: ChefOptimizerDep
) -> BookingAdminService:
    return BookingAdminService(repos, payouts, tiers, optimizer)


def get_intake_service(repos: ReposDep, notifications: NotificationServiceDep) -> IntakeService:
    return IntakeService(repos, notifications)


def get_invite_service(repos: ReposDep, notifications: NotificationServiceDep) -> InviteService:
    return InviteService(repos, notifications, app_base_url=settings.app_base_url)


def get_impact_service(repos: ReposDep) -> ImpactService:
    return ImpactService(repos)


def get_matching_service(repos: ReposDep) -> FarmerMatchingService:
    return FarmerMatchingService(repos)


def get_onboarding_service(repos: ReposDep, payments: PaymentsClientDep) -> OnboardingService:
    return OnboardingService(repos, payments, app_base_url=settings.app_base_url)


ImpactServiceDep = Annotated[ImpactService, Depends(get_impact_service)]


def get_webhook_service(repos: ReposDep, payouts: PayoutEngineDep, impact: ImpactServiceDep) -> PaymentWebhookService:
    return PaymentWebhookService(repos, payouts, impact)


BookingAdminServiceDep = Annotated[BookingAdminService, Depends(get_booking_admin_service)]
IntakeServiceDep = Annotated[IntakeService, Depends(get_intake_service)]
InviteServiceDep = Annotated[InviteService, Depends(get_invite_service)]
MatchingServiceDep = Annotated[FarmerMatchingService, Depends(get_matching_service)]
OnboardingServiceDep = Annotated[OnboardingService, Depends(get_onboarding_service)]
WebhookServiceDep = Annotated[PaymentWebhookService, Depends(get_webhook_service)]
