import json
import time

import pytest
from httpx import AsyncClient

from bornfidis_provisions.core.database.base import utc_now
from bornfidis_provisions.server.services.webhooks import sign_payload

pytestmark = pytest.mark.asyncio

SECRET = "whsec_test"
URL = "/api/v1/webhooks/payments"


def _event(booking_id: str, payment_type: str) -> bytes:
    return json.dumps(
        {
            "id": "evt_api",
            "type": "checkout.completed",
            "data": {"id": "cs_1", "metadata": {"booking_id": booking_id, "payment_type": payment_type}},
        }
    ).encode()


def _signed(body: bytes) -> dict:
    return {"X-Bornfidis-Signature": sign_payload(SECRET, body), "Content-Type": "application/json"}


async def test_missing_signature(client: AsyncClient):
    response = await client.post(URL, content=_event("b1", "deposit"))

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Missing signature"}


async def test_invalid_signature(client: AsyncClient):
    body = _event("b1", "deposit")

    response = await client.post(URL, content=body, headers={"X-Bornfidis-Signature": sign_payload("whsec_wrong", body)})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid signature"


async def test_non_ascii_signature_is_a_bad_request(client: AsyncClient):
    body = _event("b1", "deposit")
    header = f"t={int(time.time())},v1=é".encode("latin-1")

    response = await client.post(URL, content=body, headers={"X-Bornfidis-Signature": header})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid signature"


async def test_malformed_payload(client: AsyncClient):
    body = b"{not json"

    response = await client.post(URL, content=body, headers=_signed(body))

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid webhook payload"


async def test_deposit(client: AsyncClient, seed, repos):
    booking = await seed.booking(status="Quoted")
    body = _event(booking.id, "deposit")

    response = await client.post(URL, content=body, headers=_signed(body))

    assert response.status_code == 200
    assert response.json()["received"] is True
    assert response.json()["handled"] is True
    assert (await repos.bookings.get_by_id(booking.id)).status == "booked"


async def test_balance_triggers_chef_payout(client: AsyncClient, seed, payments_api):
    booking = await seed.booking(status="booked", job_completed_at=utc_now())
    await seed.chef_assignment(booking, await seed.chef())
    body = _event(booking.id, "balance")

    response = await client.post(URL, content=body, headers=_signed(body))

    assert response.status_code == 200
    assert response.json()["detail"]["chef_payout"].startswith("paid")
    assert [t["idempotency_key"] for t in payments_api.transfers][0].startswith("chef-payout-")


async def test_unknown_booking_is_acknowledged(client: AsyncClient):
    body = _event("missing", "deposit")

    response = await client.post(URL, content=body, headers=_signed(body))

    assert response.status_code == 200
    assert response.json()["handled"] is False
