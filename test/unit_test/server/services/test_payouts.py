"""Unit tests for the idempotent payout engine.

Tests cover:
- Chef payout preconditions and their order (hold, completion, payment)
- Account blockers persisted on the booking
- Idempotency (repeat calls never create a second transfer)
- Transfer failures recorded on the ledger and retried on the same row
- Farmer assignment and ingredient order payouts
"""

from __future__ import annotations

import pytest

from bornfidis_provisions.core.clients import PaymentsApiError
from bornfidis_provisions.core.database.base import utc_now
from bornfidis_provisions.core.models.domain import LedgerStatus, PayoutStatus
from bornfidis_provisions.server.services.payouts import (
    ACCOUNT_PAYOUTS_DISABLED,
    ALREADY_COMPLETED,
    ASSIGNMENT_ON_HOLD,
    BOOKING_ON_HOLD,
    INGREDIENT_JOB_NOT_COMPLETED,
    JOB_NOT_COMPLETED,
    NO_CHEF_ASSIGNED,
    NOT_FULLY_PAID,
    ZERO_AMOUNT,
    PayoutEngine,
    describe_result,
    transfer_key,
)


@pytest.fixture
def engine(repos, payments_client) -> PayoutEngine:
    return PayoutEngine(repos, payments_client)


class TestChefPayoutPreconditions:
    async def test_unknown_booking_is_an_error(self, engine):
        result = await engine.try_chef_payout("missing")

        assert result.success is False
        assert result.error == "Booking not found"

    async def test_no_assignment_blocks(self, engine, seed):
        booking = await seed.ready_booking()

        result = await engine.try_chef_payout(booking.id)

        assert result.success is True
        assert result.blockers == [NO_CHEF_ASSIGNED]

    async def test_hold_is_checked_before_completion_and_payment(self, engine, seed, payments_api):
        booking = await seed.booking(payout_hold=True, payout_hold_reason="Client dispute")
        await seed.chef_assignment(booking, await seed.chef())

        result = await engine.try_chef_payout(booking.id)

        assert result.blockers == ["Payout on hold: Client dispute"]
        assert payments_api.transfers == []

    async def test_hold_without_reason(self, engine, seed):
        booking = await seed.ready_booking(payout_hold=True)
        await seed.chef_assignment(booking, await seed.chef())

        result = await engine.try_chef_payout(booking.id)

        assert result.blockers == ["Payout on hold: No reason provided"]

    async def test_completion_is_checked_before_payment(self, engine, seed):
        booking = await seed.booking()
        await seed.chef_assignment(booking, await seed.chef())

        result = await engine.try_chef_payout(booking.id)

        assert result.blockers == [JOB_NOT_COMPLETED]

    async def test_not_fully_paid(self, engine, seed):
        booking = await seed.booking(job_completed_at=utc_now())
        await seed.chef_assignment(booking, await seed.chef())

        result = await engine.try_chef_payout(booking.id)

        assert result.blockers == [NOT_FULLY_PAID]

    async def test_precondition_blockers_are_not_persisted(self, engine, seed, repos):
        booking = await seed.booking()
        await seed.chef_assignment(booking, await seed.chef())

        await engine.try_chef_payout(booking.id)

        stored = await repos.bookings.get_by_id(booking.id)
        assert stored.get_blockers_list() == []
        assert stored.chef_payout_status != PayoutStatus.blocked.value


class TestChefAccountBlockers:
    async def test_unconnected_chef_collects_every_blocker(self, engine, seed, repos, payments_api):
        booking = await seed.ready_booking()
        chef = await seed.chef(connected=False)
        await seed.chef_assignment(booking, chef)

        result = await engine.try_chef_payout(booking.id)

        assert result.success is True
        assert result.blockers == [
            "Chef has no payout account",
            "Chef payout account status: not_connected",
            "Chef payouts are not enabled",
        ]
        stored = await repos.bookings.get_by_id(booking.id)
        assert stored.chef_payout_status == PayoutStatus.blocked.value
        assert stored.get_blockers_list() == result.blockers
        assert payments_api.transfers == []

    async def test_provider_reports_payouts_disabled(self, engine, seed, payments_api):
        booking = await seed.ready_booking()
        chef = await seed.chef()
        payments_api.connect(chef.payout_account_id, payouts_enabled=False)
        await seed.chef_assignment(booking, chef)

        result = await engine.try_chef_payout(booking.id)

        assert result.blockers == [ACCOUNT_PAYOUTS_DISABLED]

    async def test_provider_lookup_failure_blocks(self, engine, seed, payments_api):
        booking = await seed.ready_booking()
        await seed.chef_assignment(booking, await seed.chef())
        payments_api.account_error_status = 500

        result = await engine.try_chef_payout(booking.id)

        assert result.blockers == [ACCOUNT_PAYOUTS_DISABLED]
        assert payments_api.transfers == []

    async def test_zero_amount_is_an_error(self, engine, seed):
        booking = await seed.ready_booking()
        await seed.chef_assignment(booking, await seed.chef(), payout_amount_cents=0)

        result = await engine.try_chef_payout(booking.id)

        assert result.success is False
        assert result.error == ZERO_AMOUNT


class TestChefPayoutTransfer:
    async def test_successful_payout_updates_ledger_assignment_and_booking(self, engine, seed, repos, payments_api):
        booking = await seed.ready_booking()
        chef = await seed.chef()
        await seed.chef_assignment(booking, chef, payout_amount_cents=70_000)

        result = await engine.try_chef_payout(booking.id)

        assert result.success is True
        assert result.payout_created is True
        assert result.transfer_id == "tr_1"

        [transfer] = payments_api.transfers
        assert transfer["amount"] == 70_000
        assert transfer["destination"] == chef.payout_account_id
        assert transfer["idempotency_key"] == f"chef-payout-{result.payout_id}"
        assert transfer["metadata"]["booking_id"] == booking.id

        ledger = await repos.chef_payouts.get_by_booking(booking.id)
        assert ledger.status == LedgerStatus.paid.value
        assert ledger.transfer_id == "tr_1"
        assert ledger.paid_at is not None

        assignment = await repos.chef_assignments.get_by_booking(booking.id)
        assert assignment.payout_status == PayoutStatus.paid.value
        assert assignment.transfer_id == "tr_1"

        stored = await repos.bookings.get_by_id(booking.id)
        assert stored.chef_payout_status == PayoutStatus.paid.value
        assert stored.chef_payout_amount_cents == 70_000
        assert stored.stripe_transfer_id == "tr_1"
        assert stored.chef_paid_at is not None

    async def test_repeat_call_is_idempotent(self, engine, seed, payments_api):
        booking = await seed.ready_booking()
        await seed.chef_assignment(booking, await seed.chef())

        first = await engine.try_chef_payout(booking.id)
        second = await engine.try_chef_payout(booking.id)

        assert first.payout_created is True
        assert second.payout_created is False
        assert second.message == ALREADY_COMPLETED
        assert second.transfer_id == first.transfer_id
        assert len(payments_api.transfers) == 1

    async def test_paid_ledger_row_is_mirrored_without_transfer(self, engine, seed, repos, payments_api):
        from bornfidis_provisions.core.database.entities.payouts import ChefPayout

        booking = await seed.ready_booking()
        chef = await seed.chef()
        await seed.chef_assignment(booking, chef)
        await repos.chef_payouts.create(
            ChefPayout(
                booking_id=booking.id,
                chef_id=chef.id,
                amount_cents=70_000,
                status=LedgerStatus.paid.value,
                transfer_id="tr_existing",
                paid_at=utc_now(),
            )
        )

        result = await engine.try_chef_payout(booking.id)

        assert result.payout_created is False
        assert result.transfer_id == "tr_existing"
        assert payments_api.transfers == []
        assignment = await repos.chef_assignments.get_by_booking(booking.id)
        assert assignment.payout_status == PayoutStatus.paid.value

    async def test_transfer_failure_is_recorded_and_retry_reuses_row(self, engine, seed, repos, payments_api):
        booking = await seed.ready_booking()
        await seed.chef_assignment(booking, await seed.chef())
        payments_api.transfer_error_status = 402

        failed = await engine.try_chef_payout(booking.id)

        assert failed.success is False
        assert "402" in failed.error
        ledger = await repos.chef_payouts.get_by_booking(booking.id)
        assert ledger.status == LedgerStatus.failed.value
        assert ledger.error_message == failed.error
        stored = await repos.bookings.get_by_id(booking.id)
        assert stored.chef_payout_status == PayoutStatus.blocked.value

        payments_api.transfer_error_status = None
        retried = await engine.try_chef_payout(booking.id)

        assert retried.payout_created is True
        assert retried.payout_id == ledger.id
        assert len(await repos.chef_payouts.list()) == 1
        assert set(payments_api.transfer_errors) == {f"chef-payout-{ledger.id}"}
        assert payments_api.transfers[0]["idempotency_key"] == f"chef-payout-{ledger.id}-retry-1"
        assert (await repos.chef_payouts.get_by_id(ledger.id)).failed_attempts == 1


class TestFarmerPayouts:
    async def test_pays_every_pending_assignment(self, engine, seed, repos, payments_api):
        booking = await seed.ready_booking()
        farmer = await seed.farmer()
        produce = await seed.farmer_assignment(booking, farmer, role="produce", payout_amount_cents=10_000)
        fish = await seed.farmer_assignment(booking, farmer, role="fish", payout_amount_cents=5_000)

        results = await engine.try_farmer_payouts(booking.id)

        assert [r.reference_id for r in results] == [produce.id, fish.id]
        assert all(r.payout_created for r in results)
        assert sorted(t["amount"] for t in payments_api.transfers) == [5_000, 10_000]
        assert {t["idempotency_key"] for t in payments_api.transfers} == {
            f"farmer-payout-{produce.id}",
            f"farmer-payout-{fish.id}",
        }
        stored = await repos.farmer_assignments.get_by_id(produce.id)
        assert stored.payout_status == PayoutStatus.paid.value
        assert stored.paid_at is not None

        assert await engine.try_farmer_payouts(booking.id) == []
        again = await engine.try_farmer_payout(produce.id)
        assert again.message == ALREADY_COMPLETED
        assert len(payments_api.transfers) == 2

    async def test_on_hold_assignment_is_skipped(self, engine, seed):
        booking = await seed.ready_booking()
        assignment = await seed.farmer_assignment(booking, await seed.farmer(), payout_status="on_hold")

        result = await engine.try_farmer_payout(assignment.id)

        assert result.blockers == [ASSIGNMENT_ON_HOLD]

    @pytest.mark.parametrize(
        "booking_state,blocker",
        [
            ({"payout_hold": True}, BOOKING_ON_HOLD),
            ({"job_completed_at": None}, JOB_NOT_COMPLETED),
            ({"fully_paid_at": None}, NOT_FULLY_PAID),
        ],
    )
    async def test_booking_state_blocks(self, engine, seed, booking_state, blocker):
        booking = await seed.ready_booking(**booking_state)
        assignment = await seed.farmer_assignment(booking, await seed.farmer())

        result = await engine.try_farmer_payout(assignment.id)

        assert result.success is True
        assert result.blockers == [blocker]

    async def test_account_blockers_put_assignment_on_hold(self, engine, seed, repos):
        booking = await seed.ready_booking()
        assignment = await seed.farmer_assignment(booking, await seed.farmer(connected=False))

        result = await engine.try_farmer_payout(assignment.id)

        assert "Farmer has no payout account" in result.blockers
        stored = await repos.farmer_assignments.get_by_id(assignment.id)
        assert stored.payout_status == PayoutStatus.on_hold.value
        assert "Farmer has no payout account" in stored.payout_error

    async def test_transfer_failure_marks_assignment_failed(self, engine, seed, repos, payments_api):
        booking = await seed.ready_booking()
        assignment = await seed.farmer_assignment(booking, await seed.farmer())
        payments_api.transfer_error_status = 500

        result = await engine.try_farmer_payout(assignment.id)

        assert result.success is False
        stored = await repos.farmer_assignments.get_by_id(assignment.id)
        assert stored.payout_status == PayoutStatus.failed.value
        assert stored.payout_error == result.error
        assert stored.payout_failures == 1

    async def test_retry_after_failure_uses_a_new_key(self, engine, seed, payments_api):
        booking = await seed.ready_booking()
        assignment = await seed.farmer_assignment(booking, await seed.farmer())
        payments_api.transfer_error_status = 500
        await engine.try_farmer_payout(assignment.id)
        payments_api.transfer_error_status = None

        with pytest.raises(PaymentsApiError):
            await engine.payments.create_transfer(
                amount_cents=10_000,
                destination="acct_any",
                description="replay",
                idempotency_key=f"farmer-payout-{assignment.id}",
            )
        result = await engine.try_farmer_payout(assignment.id)

        assert result.payout_created is True
        assert [t["idempotency_key"] for t in payments_api.transfers] == [f"farmer-payout-{assignment.id}-retry-1"]


class TestIngredientPayouts:
    async def test_delivered_order_is_paid(self, engine, seed, repos, payments_api):
        booking = await seed.ready_booking()
        farmer = await seed.farmer()
        order = await seed.ingredient_order(booking, farmer, await seed.ingredient(), total_cents=2_500)

        [result] = await engine.try_ingredient_payouts(booking.id)

        assert result.payout_created is True
        assert payments_api.transfers[0]["idempotency_key"] == f"ingredient-payout-{order.id}"
        stored = await repos.booking_ingredients.get_by_id(order.id)
        assert stored.payout_status == PayoutStatus.paid.value
        assert stored.fulfillment_status == "paid"
        assert stored.transfer_id == result.transfer_id

    async def test_undelivered_order_is_blocked(self, engine, seed):
        booking = await seed.ready_booking()
        order = await seed.ingredient_order(
            booking, await seed.farmer(), await seed.ingredient(), fulfillment_status="confirmed"
        )

        result = await engine.try_ingredient_payout(order.id)

        assert result.blockers == ["Ingredient not delivered (status: confirmed)"]

    async def test_undelivered_orders_are_not_attempted_in_bulk(self, engine, seed, payments_api):
        booking = await seed.ready_booking()
        await seed.ingredient_order(booking, await seed.farmer(), await seed.ingredient(), fulfillment_status="pending")

        assert await engine.try_ingredient_payouts(booking.id) == []
        assert payments_api.transfers == []

    async def test_job_must_be_completed(self, engine, seed):
        booking = await seed.ready_booking(job_completed_at=None)
        order = await seed.ingredient_order(booking, await seed.farmer(), await seed.ingredient())

        result = await engine.try_ingredient_payout(order.id)

        assert result.blockers == [INGREDIENT_JOB_NOT_COMPLETED]

    async def test_missing_order(self, engine):
        result = await engine.try_ingredient_payout("missing")

        assert result.success is False
        assert result.error == "Booking ingredient not found"


class TestDescribeResult:
    def test_summaries(self):
        from bornfidis_provisions.core.models.io.common import PayoutResult

        assert describe_result(PayoutResult(success=True, payout_created=True, transfer_id="tr_1")) == "paid (transfer tr_1)"
        assert describe_result(PayoutResult(success=True, blockers=["a", "b"])) == "blocked: a; b"
        assert describe_result(PayoutResult(success=False, error="boom")) == "boom"
        assert describe_result(PayoutResult(success=True, message="done")) == "done"


@pytest.mark.parametrize(
    "failures,expected",
    [
        (0, "chef-payout-p1"),
        (1, "chef-payout-p1-retry-1"),
        (3, "chef-payout-p1-retry-3"),
    ],
)
def test_transfer_key_moves_on_after_each_failure(failures, expected):
    assert transfer_key("chef-payout", "p1", failures) == expected
