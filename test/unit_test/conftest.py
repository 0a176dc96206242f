"""Shared fixtures for unit tests.

Provides an in-memory SQLite database with every table created, the
repository bundle over it, and in-process fakes of the payments and
messaging REST APIs served through ``httpx.MockTransport``.
"""

from __future__ import annotations

import json
from datetime import date, timedelta
from typing import Any, AsyncGenerator, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.pool import StaticPool

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
PAYMENTS_BASE_URL = "http://mock-payments/v1"
MESSAGING_BASE_URL = "http://mock-messaging/v1"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for each test."""
    import bornfidis_provisions.core.database.entities  # noqa: F401

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    async_session_maker = sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session_maker() as session:  # type: ignore[attr-defined]
        yield session


@pytest.fixture
def repos(session):
    from bornfidis_provisions.core.database.repositories import build_sql_repos_from_session

    return build_sql_repos_from_session(session=session)


# ---------------------------------------------------------------------------
# Payments API fake
# ---------------------------------------------------------------------------


class FakePaymentsApi:
    """In-process stand-in for the payments REST API.

    Transfers are deduplicated by ``Idempotency-Key`` the way the real
    provider does it: a key replays its first response, success or error.
    Every request is recorded.
    """

    def __init__(self) -> None:
        self.accounts: Dict[str, Dict[str, Any]] = {}
        self.transfers: List[Dict[str, Any]] = []
        self.requests: List[httpx.Request] = []
        self.transfer_error_status: Optional[int] = None
        self.account_error_status: Optional[int] = None
        self.account_create_error_status: Optional[int] = None
        self.account_link_error_status: Optional[int] = None
        self.transfer_errors: Dict[str, int] = {}

    def connect(self, account_id: str, *, payouts_enabled: bool = True, charges_enabled: bool = True) -> None:
        self.accounts[account_id] = {
            "id": account_id,
            "charges_enabled": charges_enabled,
            "payouts_enabled": payouts_enabled,
            "details_submitted": True,
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "GET" and path.startswith("/v1/accounts/"):
            if self.account_error_status is not None:
                return httpx.Response(self.account_error_status, json={"error": "unavailable"})
            account = self.accounts.get(path.rsplit("/", 1)[-1])
            if account is None:
                return httpx.Response(404, json={"error": "No such account"})
            return httpx.Response(200, json=account)

        if request.method == "POST" and path == "/v1/transfers":
            body = json.loads(request.content)
            key = request.headers.get("Idempotency-Key")
            if key in self.transfer_errors:
                return httpx.Response(self.transfer_errors[key], json={"error": "Insufficient funds"})
            if self.transfer_error_status is not None:
                if key:
                    self.transfer_errors[key] = self.transfer_error_status
                return httpx.Response(self.transfer_error_status, json={"error": "Insufficient funds"})
            for existing in self.transfers:
                if key and existing["idempotency_key"] == key:
                    return httpx.Response(200, json=existing)
            transfer = {
                "id": f"tr_{len(self.transfers) + 1}",
                "amount": body["amount"],
                "destination": body["destination"],
                "status": "paid",
                "metadata": body.get("metadata", {}),
                "idempotency_key": key,
            }
            self.transfers.append(transfer)
            return httpx.Response(200, json=transfer)

        if request.method == "POST" and path == "/v1/accounts":
            if self.account_create_error_status is not None:
                return httpx.Response(self.account_create_error_status, json={"error": "unavailable"})
            body = json.loads(request.content)
            account_id = f"acct_{len(self.accounts) + 1}"
            self.accounts[account_id] = {"id": account_id, "email": body.get("email")}
            return httpx.Response(200, json=self.accounts[account_id])

        if request.method == "POST" and path == "/v1/account_links":
            if self.account_link_error_status is not None:
                return httpx.Response(self.account_link_error_status, json={"error": "unavailable"})
            return httpx.Response(200, json={"url": "https://connect.example/onboard/abc", "expires_at": 0})

        return httpx.Response(404, json={"error": "Unknown endpoint"})


@pytest.fixture
def payments_api() -> FakePaymentsApi:
    return FakePaymentsApi()


@pytest_asyncio.fixture
async def payments_client(payments_api):
    from bornfidis_provisions.core.clients import PaymentsClient

    client = PaymentsClient(
        PAYMENTS_BASE_URL,
        api_key="sk_test",
        client=httpx.AsyncClient(transport=httpx.MockTransport(payments_api.handler)),
    )
    yield client
    await client.aclose()


# ---------------------------------------------------------------------------
# Messaging API fake
# ---------------------------------------------------------------------------


class FakeMessagingApi:
    """In-process stand-in for the messaging REST API.

    ``sms_failures`` is a queue of status codes returned (in order) before
    SMS requests start succeeding.
    """

    def __init__(self) -> None:
        self.sms: List[Dict[str, Any]] = []
        self.emails: List[Dict[str, Any]] = []
        self.sms_attempts = 0
        self.sms_failures: List[int] = []
        self.email_error_status: Optional[int] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if request.url.path == "/v1/sms":
            self.sms_attempts += 1
            if self.sms_failures:
                return httpx.Response(self.sms_failures.pop(0), json={"error": "try later"})
            self.sms.append(body)
            return httpx.Response(200, json={"id": f"sms_{len(self.sms)}", "status": "queued"})
        if request.url.path == "/v1/email":
            if self.email_error_status is not None:
                return httpx.Response(self.email_error_status, json={"error": "rejected"})
            self.emails.append(body)
            return httpx.Response(200, json={"id": f"email_{len(self.emails)}", "status": "sent"})
        return httpx.Response(404, json={"error": "Unknown endpoint"})


@pytest.fixture
def messaging_api() -> FakeMessagingApi:
    return FakeMessagingApi()


@pytest_asyncio.fixture
async def messaging_client(messaging_api):
    from bornfidis_provisions.core.clients import MessagingClient

    client = MessagingClient(
        MESSAGING_BASE_URL,
        api_key="msg_test",
        sms_from="+18765550000",
        client=httpx.AsyncClient(transport=httpx.MockTransport(messaging_api.handler)),
    )
    yield client
    await client.aclose()


@pytest.fixture
def notifications(messaging_client):
    from bornfidis_provisions.server.services.notifications import NotificationService

    return NotificationService(
        messaging_client,
        admin_email="admin@bornfidis.com",
        coordinator_phone="+18765550100",
        backoff_initial=0.0,
        backoff_max=0.0,
    )


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------


class Seeder:
    """Creates committed rows with sensible defaults through the repositories."""

    def __init__(self, repos, payments_api: FakePaymentsApi) -> None:
        self.repos = repos
        self.payments_api = payments_api

    async def booking(self, **overrides):
        from bornfidis_provisions.core.database.entities.bookings import BookingInquiry

        values: Dict[str, Any] = dict(
            name="Campbell Wedding",
            email="client@example.com",
            phone="+18765551234",
            event_date=date.today() + timedelta(days=30),
            event_time="18:00",
            location="Frenchman's Cove, Portland",
            guests=10,
            quote_total_cents=100_000,
            deposit_amount_cents=30_000,
            balance_amount_cents=70_000,
        )
        values.update(overrides)
        return await self.repos.bookings.create(BookingInquiry(**values))

    async def ready_booking(self, **overrides):
        """A booking that is fully paid and completed."""
        from bornfidis_provisions.core.database.base import utc_now

        now = utc_now()
        overrides.setdefault("fully_paid_at", now)
        overrides.setdefault("balance_paid_at", now)
        overrides.setdefault("job_completed_at", now)
        return await self.booking(**overrides)

    async def chef(self, *, connected: bool = True, **overrides):
        from bornfidis_provisions.core.database.entities.chefs import Chef

        values: Dict[str, Any] = dict(
            name="Chef Marcia",
            email="marcia@example.com",
            parish="Portland",
            status="active",
            rating=4.5,
        )
        if connected:
            account_id = overrides.pop("payout_account_id", f"acct_chef_{len(self.payments_api.accounts) + 1}")
            values.update(
                payout_account_id=account_id,
                payout_account_status="connected",
                payouts_enabled=True,
            )
            self.payments_api.connect(account_id)
        values.update(overrides)
        return await self.repos.chefs.create(Chef(**values))

    async def farmer(self, *, connected: bool = True, crops: Optional[List[str]] = None, **overrides):
        from bornfidis_provisions.core.database.entities.farmers import Farmer

        values: Dict[str, Any] = dict(
            name="Devon Farm",
            phone="+18765552222",
            parish="Portland",
            acres=20.0,
            status="approved",
        )
        if connected:
            account_id = overrides.pop("payout_account_id", f"acct_farmer_{len(self.payments_api.accounts) + 1}")
            values.update(
                payout_account_id=account_id,
                payout_account_status="connected",
                payouts_enabled=True,
            )
            self.payments_api.connect(account_id)
        values.update(overrides)
        farmer = await self.repos.farmers.create(Farmer(**values))
        if crops:
            await self.repos.farmers.add_crops(farmer.id, crops)
        return farmer

    async def chef_assignment(self, booking, chef, **overrides):
        from bornfidis_provisions.core.database.entities.assignments import BookingChef

        values: Dict[str, Any] = dict(
            booking_id=booking.id,
            chef_id=chef.id,
            payout_percent=70.0,
            payout_amount_cents=70_000,
            platform_fee_cents=30_000,
        )
        values.update(overrides)
        assignment = await self.repos.chef_assignments.create(BookingChef(**values))
        booking.assigned_chef_id = chef.id
        await self.repos.bookings.update(booking)
        return assignment

    async def farmer_assignment(self, booking, farmer, **overrides):
        from bornfidis_provisions.core.database.entities.assignments import BookingFarmer

        values: Dict[str, Any] = dict(
            booking_id=booking.id,
            farmer_id=farmer.id,
            role="produce",
            payout_percent=10.0,
            payout_amount_cents=10_000,
        )
        values.update(overrides)
        return await self.repos.farmer_assignments.create(BookingFarmer(**values))

    async def ingredient(self, **overrides):
        from bornfidis_provisions.core.database.entities.ingredients import Ingredient

        values: Dict[str, Any] = dict(name="Callaloo", unit="lb", regenerative_score=8)
        values.update(overrides)
        return await self.repos.ingredients.create(Ingredient(**values))

    async def ingredient_order(self, booking, farmer, ingredient, **overrides):
        from bornfidis_provisions.core.database.entities.ingredients import BookingIngredient

        values: Dict[str, Any] = dict(
            booking_id=booking.id,
            ingredient_id=ingredient.id,
            farmer_id=farmer.id,
            quantity=5.0,
            total_cents=2_500,
            fulfillment_status="delivered",
        )
        values.update(overrides)
        return await self.repos.booking_ingredients.create(BookingIngredient(**values))


@pytest.fixture
def seed(repos, payments_api) -> Seeder:
    return Seeder(repos, payments_api)
