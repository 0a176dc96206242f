"""Unit tests for server services dependencies.

Tests verify the Annotated dependency aliases and the wiring of services
built around a request's repository bundle.
"""

from unittest.mock import patch

import pytest

from bornfidis_provisions.core.clients import MessagingClient, PaymentsClient
from bornfidis_provisions.server.services import deps
from bornfidis_provisions.server.services.bookings import BookingAdminService
from bornfidis_provisions.server.services.chef_optimizer import ChefOptimizer
from bornfidis_provisions.server.services.chef_tier import ChefTierService
from bornfidis_provisions.server.services.impact import ImpactService
from bornfidis_provisions.server.services.invites import InviteService
from bornfidis_provisions.server.services.payouts import PayoutEngine
from bornfidis_provisions.server.services.webhooks import PaymentWebhookService


class TestDependencyAliases:
    """Test the Annotated aliases point at their providers."""

    @pytest.mark.parametrize(
        ("alias", "provider"),
        [
            (deps.ReposDep, deps.get_repos),
            (deps.PaymentsClientDep, deps.get_payments_client),
            (deps.MessagingClientDep, deps.get_messaging_client),
            (deps.NotificationServiceDep, deps.get_notification_service),
            (deps.PayoutEngineDep, deps.get_payout_engine),
            (deps.BookingAdminServiceDep, deps.get_booking_admin_service),
            (deps.IntakeServiceDep, deps.get_intake_service),
            (deps.InviteServiceDep, deps.get_invite_service),
            (deps.MatchingServiceDep, deps.get_matching_service),
            (deps.WebhookServiceDep, deps.get_webhook_service),
        ],
    )
    def test_alias_uses_provider(self, alias, provider):
        metadata = alias.__metadata__
        assert len(metadata) > 0
        assert metadata[0].dependency is provider


class TestSharedClients:
    """Test the process-wide outbound clients."""

    async def test_clients_are_singletons_until_closed(self):
        with patch.object(deps, "_payments_client", None), patch.object(deps, "_messaging_client", None):
            payments = deps.get_payments_client()
            messaging = deps.get_messaging_client()

            assert isinstance(payments, PaymentsClient)
            assert isinstance(messaging, MessagingClient)
            assert deps.get_payments_client() is payments
            assert deps.get_messaging_client() is messaging

            await deps.close_clients()

            assert deps._payments_client is None
            assert deps._messaging_client is None


class TestServiceWiring:
    """Test services are assembled around the shared repository bundle."""

    def test_booking_admin_service(self, repos, payments_client):
        payouts = deps.get_payout_engine(repos, payments_client)
        tiers = deps.get_chef_tier_service(repos)
        optimizer = deps.get_chef_optimizer(repos, tiers)

        service = deps.get_booking_admin_service(repos, payouts, tiers, optimizer)

        assert isinstance(service, BookingAdminService)
        assert isinstance(service.payouts, PayoutEngine)
        assert isinstance(service.tiers, ChefTierService)
        assert isinstance(service.optimizer, ChefOptimizer)
        assert service.repos is repos
        assert service.payouts.repos is repos

    def test_invite_service_uses_app_base_url(self, repos, messaging_client):
        notifications = deps.get_notification_service(messaging_client)

        service = deps.get_invite_service(repos, notifications)

        assert isinstance(service, InviteService)
        assert not service.app_base_url.endswith("/")

    def test_webhook_service(self, repos, payments_client):
        service = deps.get_webhook_service(
            repos, deps.get_payout_engine(repos, payments_client), deps.get_impact_service(repos)
        )

        assert isinstance(service, PaymentWebhookService)
        assert isinstance(service.impact, ImpactService)
