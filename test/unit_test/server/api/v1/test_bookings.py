from datetime import date, timedelta

import pytest
from httpx import AsyncClient

from bornfidis_provisions.core.database.base import utc_now

pytestmark = pytest.mark.asyncio


def _form(**overrides):
    data = {
        "name": "Campbell Wedding",
        "email": "client@example.com",
        "phone": "876-555-1234",
        "event_date": (date.today() + timedelta(days=14)).isoformat(),
        "event_time": "18:30",
        "location": "Frenchman's Cove, Portland",
        "guests": 25,
    }
    data.update(overrides)
    return data


async def test_submit_booking(client: AsyncClient, repos, messaging_api):
    response = await client.post("/api/v1/bookings", json=_form())

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    booking = await repos.bookings.get_by_id(body["booking_id"])
    assert booking.status == "New"
    assert len(messaging_api.emails) == 2
    assert [s["to"] for s in messaging_api.sms] == ["+18765551234"]


async def test_submit_booking_in_the_past(client: AsyncClient):
    response = await client.post(
        "/api/v1/bookings", json=_form(event_date=(date.today() - timedelta(days=1)).isoformat())
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Event date must be today or in the future"
    assert body["details"][0]["loc"] == ["body", "event_date"]


async def test_submit_booking_bad_time(client: AsyncClient):
    response = await client.post("/api/v1/bookings", json=_form(event_time="6pm"))

    assert response.status_code == 400
    assert response.json()["error"] == "Event time must be in HH:MM format"


async def test_submit_booking_missing_fields(client: AsyncClient):
    response = await client.post("/api/v1/bookings", json={"name": "A"})

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert len(response.json()["details"]) > 1


async def test_submit_booking_honeypot(client: AsyncClient, repos):
    response = await client.post("/api/v1/bookings", json=_form(website_url="http://buy-now.example"))

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Spam detected"}
    assert await repos.bookings.list() == []


async def test_admin_routes_require_token(client: AsyncClient):
    response = await client.get("/api/v1/bookings")

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Authentication required"}


async def test_admin_routes_reject_invalid_token(client: AsyncClient):
    response = await client.get("/api/v1/bookings", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


async def test_admin_routes_require_admin_role(client: AsyncClient, user_headers):
    response = await client.get("/api/v1/bookings", headers=user_headers)

    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Access denied: Admin role required"}


async def test_list_and_get_bookings(client: AsyncClient, admin_headers, seed):
    quoted = await seed.booking(name="Quoted Dinner", status="Quoted")
    await seed.booking(name="New Dinner", status="New")

    response = await client.get("/api/v1/bookings", headers=admin_headers)
    assert response.status_code == 200
    assert {b["name"] for b in response.json()} == {"Quoted Dinner", "New Dinner"}

    response = await client.get("/api/v1/bookings", params={"status": "Quoted"}, headers=admin_headers)
    assert [b["id"] for b in response.json()] == [quoted.id]

    response = await client.get(f"/api/v1/bookings/{quoted.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["chef_payout_blockers"] == []


async def test_get_unknown_booking(client: AsyncClient, admin_headers):
    response = await client.get("/api/v1/bookings/missing", headers=admin_headers)

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Booking not found"}


async def test_quote_booking(client: AsyncClient, admin_headers, seed):
    booking = await seed.booking(quote_total_cents=0, deposit_amount_cents=0, balance_amount_cents=0)

    response = await client.put(
        f"/api/v1/bookings/{booking.id}/quote",
        json={"quote_total_cents": 200_000, "deposit_amount_cents": 60_000},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["balance_amount_cents"] == 140_000
    assert response.json()["status"] == "Quoted"


async def test_assign_chef_with_tier(client: AsyncClient, admin_headers, seed):
    booking = await seed.booking()
    chef = await seed.chef(tier_override="PRO")

    response = await client.post(
        f"/api/v1/bookings/{booking.id}/assign-chef",
        json={"chef_id": chef.id, "payout_percent": 70},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["tier_multiplier"] == 1.1
    assert body["assignment"]["payout_amount_cents"] == 77_000
    assert body["assignment"]["platform_fee_cents"] == 23_000


async def test_assign_chef_twice(client: AsyncClient, admin_headers, seed):
    booking = await seed.booking()
    chef = await seed.chef()
    url = f"/api/v1/bookings/{booking.id}/assign-chef"

    await client.post(url, json={"chef_id": chef.id}, headers=admin_headers)
    response = await client.post(url, json={"chef_id": chef.id}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Booking already has an assigned chef"


async def test_assign_farmer_validation(client: AsyncClient, admin_headers, seed):
    booking = await seed.booking()
    farmer = await seed.farmer()
    url = f"/api/v1/bookings/{booking.id}/assign-farmer"

    bad_role = await client.post(url, json={"farmer_id": farmer.id, "role": "wine"}, headers=admin_headers)
    assert bad_role.status_code == 400

    bad_percent = await client.post(
        url, json={"farmer_id": farmer.id, "role": "produce", "payout_percent": 120}, headers=admin_headers
    )
    assert bad_percent.status_code == 400
    assert bad_percent.json()["error"] == "payout_percent must be between 0 and 100"

    ok = await client.post(url, json={"farmer_id": farmer.id, "role": "produce"}, headers=admin_headers)
    assert ok.status_code == 200
    assert ok.json()["assignment"]["payout_amount_cents"] == 60_000


async def test_completion_hold_and_payout_flow(client: AsyncClient, admin_headers, seed, payments_api):
    booking = await seed.booking(fully_paid_at=utc_now())
    await seed.chef_assignment(booking, await seed.chef())
    base = f"/api/v1/bookings/{booking.id}"

    response = await client.post(f"{base}/payout-hold", json={"hold": True, "reason": "Invoice check"}, headers=admin_headers)
    assert response.json() == {"success": True, "message": "Payout put on hold"}

    response = await client.post(f"{base}/confirm-completion", headers=admin_headers)
    assert response.json()["message"] == "Job marked as completed"

    response = await client.post(f"{base}/run-payout", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Payout cannot be processed due to blockers"
    assert response.json()["blockers"] == ["Payout on hold: Invoice check"]

    response = await client.post(f"{base}/release-payout", headers=admin_headers)
    assert response.json()["message"] == "Payout released and processed"
    assert len(payments_api.transfers) == 1

    response = await client.post(f"{base}/run-payout", headers=admin_headers)
    assert response.json()["message"] == "Payout already exists or not eligible"
    assert len(payments_api.transfers) == 1


async def test_payout_hold_requires_boolean(client: AsyncClient, admin_headers, seed):
    booking = await seed.booking()

    response = await client.post(
        f"/api/v1/bookings/{booking.id}/payout-hold", json={"hold": "yes"}, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json()["error"] == "hold must be a boolean"


async def test_run_payout_failure_is_500(client: AsyncClient, admin_headers, seed, payments_api):
    booking = await seed.ready_booking()
    await seed.chef_assignment(booking, await seed.chef())
    payments_api.transfer_error_status = 400

    response = await client.post(f"/api/v1/bookings/{booking.id}/run-payout", headers=admin_headers)

    assert response.status_code == 500
    assert response.json()["success"] is False


async def test_run_farmer_payouts(client: AsyncClient, admin_headers, seed):
    booking = await seed.ready_booking()
    farmer = await seed.farmer()
    await seed.farmer_assignment(booking, farmer)

    response = await client.post(f"/api/v1/bookings/{booking.id}/run-farmer-payouts", headers=admin_headers)

    assert response.status_code == 200
    [result] = response.json()["farmer_payouts"]
    assert result["payout_created"] is True
    assert response.json()["ingredient_payouts"] == []


async def test_recommended_chefs(client: AsyncClient, admin_headers, seed):
    booking = await seed.booking()
    await seed.chef(name="Chef Elite", email="elite@example.com", tier_override="ELITE")

    response = await client.get(f"/api/v1/bookings/{booking.id}/recommended-chefs", headers=admin_headers)

    assert response.status_code == 200
    [recommendation] = response.json()["recommendations"]
    assert recommendation["name"] == "Chef Elite"
    assert recommendation["tier"] == "ELITE"


async def test_create_ingredient_orders(client: AsyncClient, admin_headers, seed):
    booking = await seed.booking()
    ingredient = await seed.ingredient()
    farmer = await seed.farmer()
    order = {"ingredient_id": ingredient.id, "farmer_id": farmer.id, "quantity": 4, "price_cents": 650}

    response = await client.post(
        f"/api/v1/bookings/{booking.id}/ingredients/orders", json={"orders": [order]}, headers=admin_headers
    )

    assert response.status_code == 201
    body = response.json()
    assert body["orders_created"] == 1
    assert body["orders"][0]["total_cents"] == 2_600
    assert body["errors"] == []


async def test_create_ingredient_orders_requires_lines(client: AsyncClient, admin_headers, seed):
    booking = await seed.booking()

    response = await client.post(
        f"/api/v1/bookings/{booking.id}/ingredients/orders", json={"orders": []}, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("orders:")
