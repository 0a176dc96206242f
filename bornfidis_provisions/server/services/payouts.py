"""
Payout engines for chefs, farmer assignments and ingredient orders.

Every engine is idempotent: it checks persisted state before moving money,
and every transfer carries an idempotency key derived from the record it
pays, so a retried call can never produce a second transfer. The key moves
on only after a failed transfer has been recorded; the provider replays
the first answer for a key, errors included.

Outcomes are reported as ``PayoutResult``:

- ``success=False``: the attempt errored (missing records, transfer failure)
- ``success=True, payout_created=False``: nothing to do, or blocked; see
  ``blockers`` and ``message``
- ``success=True, payout_created=True``: a transfer was created
"""

from __future__ import annotations

from typing import List, Optional, Union

from bornfidis_provisions.core.clients import PaymentsApiError, PaymentsClient
from bornfidis_provisions.core.database.base import utc_now
from bornfidis_provisions.core.database.entities.assignments import BookingChef
from bornfidis_provisions.core.database.entities.bookings import BookingInquiry
from bornfidis_provisions.core.database.entities.chefs import Chef
from bornfidis_provisions.core.database.entities.farmers import Farmer
from bornfidis_provisions.core.database.entities.payouts import ChefPayout
from bornfidis_provisions.core.database.repositories import SqlRepoBundle
from bornfidis_provisions.core.logging_config import get_logger
from bornfidis_provisions.core.models.domain import (
    FulfillmentStatus,
    LedgerStatus,
    PayoutAccountStatus,
    PayoutStatus,
)
from bornfidis_provisions.core.models.io.common import PayoutResult
from bornfidis_provisions.core.monitoring import log_payout_event

logger = get_logger(__name__)

ALREADY_COMPLETED = "Payout already completed"
ALREADY_PAID_IN_LEDGER = "Payout already exists and is paid"
NO_CHEF_ASSIGNED = "No chef assigned to booking"
JOB_NOT_COMPLETED = "Job must be completed before payout can be processed"
NOT_FULLY_PAID = "Booking is not fully paid"
ZERO_AMOUNT = "Payout amount is zero or negative"
ACCOUNT_PAYOUTS_DISABLED = "Payout account does not have payouts enabled"
ASSIGNMENT_ON_HOLD = "Payout is on hold"
BOOKING_ON_HOLD = "Booking payout is on hold"
INGREDIENT_JOB_NOT_COMPLETED = "Job must be completed before ingredient payout"

Payee = Union[Chef, Farmer]


def transfer_key(prefix: str, ref: str, failures: int) -> str:
    """Idempotency key for the next transfer of ``ref`` after ``failures`` recorded failures."""
    if failures <= 0:
        return f"{prefix}-{ref}"
    return f"{prefix}-{ref}-retry-{failures}"


class PayoutEngine:
    """Idempotent payout processing over the repository bundle and the payments client."""

    def __init__(self, repos: SqlRepoBundle, payments: PaymentsClient) -> None:
        self.repos = repos
        self.payments = payments

    # ------------------------------------------------------------------
    # Shared checks
    # ------------------------------------------------------------------

    async def account_blockers(self, payee: Payee, label: str) -> List[str]:
        """
        Check that a chef or farmer can receive a transfer.

        Args:
            payee: Chef or farmer to check
            label: ``"Chef"`` or ``"Farmer"``, used in the messages

        Returns:
            Blocker messages; empty when the payee can be paid
        """
        blockers: List[str] = []
        if not payee.payout_account_id:
            blockers.append(f"{label} has no payout account")
        if payee.payout_account_status != PayoutAccountStatus.connected.value:
            blockers.append(f"{label} payout account status: {payee.payout_account_status}")
        if not payee.payouts_enabled:
            blockers.append(f"{label} payouts are not enabled")

        if payee.payout_account_id:
            try:
                status = await self.payments.get_account_status(payee.payout_account_id)
                if not status.payouts_enabled:
                    blockers.append(ACCOUNT_PAYOUTS_DISABLED)
            except PaymentsApiError as e:
                logger.warning(f"Payout account check failed for {payee.payout_account_id}: {e}")
                blockers.append(ACCOUNT_PAYOUTS_DISABLED)
        return blockers

    async def _transfer(
        self,
        *,
        amount_cents: int,
        destination: str,
        description: str,
        metadata: dict,
        idempotency_key: str,
    ) -> str:
        transfer = await self.payments.create_transfer(
            amount_cents=amount_cents,
            destination=destination,
            description=description,
            metadata=metadata,
            idempotency_key=idempotency_key,
        )
        return transfer.id

    # ------------------------------------------------------------------
    # Chef
    # ------------------------------------------------------------------

    async def _ledger_row(self, booking: BookingInquiry, chef_id: str, amount_cents: int) -> ChefPayout:
        """Get the reusable (pending or failed) ledger row for a booking, or create one."""
        existing = await self.repos.chef_payouts.get_by_booking(booking.id)
        if existing is not None:
            existing.amount_cents = amount_cents
            existing.status = LedgerStatus.pending.value
            existing.error_message = None
            return await self.repos.chef_payouts.update(existing)
        return await self.repos.chef_payouts.create(
            ChefPayout(booking_id=booking.id, chef_id=chef_id, amount_cents=amount_cents)
        )

    async def _block_booking(self, booking: BookingInquiry, blockers: List[str]) -> None:
        booking.chef_payout_status = PayoutStatus.blocked.value
        booking.set_blockers_list(blockers)
        await self.repos.bookings.update(booking)

    async def try_chef_payout(self, booking_id: str) -> PayoutResult:
        """
        Attempt the chef payout for a booking.

        Args:
            booking_id: Booking to pay out

        Returns:
            PayoutResult describing what happened
        """
        booking = await self.repos.bookings.get_by_id(booking_id)
        if booking is None:
            return PayoutResult(success=False, error="Booking not found")

        assignment = await self.repos.chef_assignments.get_by_booking(booking_id)
        if assignment is None:
            return PayoutResult(success=True, blockers=[NO_CHEF_ASSIGNED])

        if (
            assignment.payout_status == PayoutStatus.paid.value
            or assignment.transfer_id
            or booking.stripe_transfer_id
        ):
            return PayoutResult(
                success=True,
                transfer_id=assignment.transfer_id or booking.stripe_transfer_id,
                message=ALREADY_COMPLETED,
            )

        if booking.payout_hold:
            reason = booking.payout_hold_reason or "No reason provided"
            return PayoutResult(success=True, blockers=[f"Payout on hold: {reason}"])
        if not booking.is_job_completed:
            return PayoutResult(success=True, blockers=[JOB_NOT_COMPLETED])
        if not booking.is_fully_paid:
            return PayoutResult(success=True, blockers=[NOT_FULLY_PAID])

        ledger = await self.repos.chef_payouts.get_by_booking(booking_id)
        if ledger is not None and ledger.status == LedgerStatus.paid.value:
            await self._sync_paid(booking, assignment, ledger)
            return PayoutResult(
                success=True,
                payout_id=ledger.id,
                transfer_id=ledger.transfer_id,
                message=ALREADY_PAID_IN_LEDGER,
            )

        chef = await self.repos.chefs.get_by_id(assignment.chef_id)
        if chef is None:
            return PayoutResult(success=False, error="Chef not found", blockers=["Chef not found"])

        blockers = await self.account_blockers(chef, "Chef")
        if blockers:
            await self._block_booking(booking, blockers)
            log_payout_event("chef", "blocked", booking_id, assignment.payout_amount_cents, blockers=blockers)
            return PayoutResult(success=True, blockers=blockers)

        amount_cents = assignment.payout_amount_cents or 0
        if amount_cents <= 0:
            return PayoutResult(success=False, error=ZERO_AMOUNT, blockers=[ZERO_AMOUNT])

        ledger = await self._ledger_row(booking, chef.id, amount_cents)
        try:
            transfer_id = await self._transfer(
                amount_cents=amount_cents,
                destination=chef.payout_account_id or "",
                description=f"Payout for booking {booking.name} ({booking.id[:8]})",
                metadata={"booking_id": booking.id, "chef_id": chef.id, "payout_id": ledger.id},
                idempotency_key=transfer_key("chef-payout", ledger.id, ledger.failed_attempts),
            )
        except PaymentsApiError as e:
            error = str(e) or "Transfer creation failed"
            ledger.status = LedgerStatus.failed.value
            ledger.error_message = error
            ledger.failed_attempts += 1
            await self.repos.chef_payouts.update(ledger)
            await self._block_booking(booking, [error])
            logger.error(f"Chef payout transfer failed for booking {booking_id}: {error}")
            log_payout_event("chef", "failed", booking_id, amount_cents, error=error)
            return PayoutResult(success=False, payout_id=ledger.id, error=error, blockers=[error])

        now = utc_now()
        ledger.status = LedgerStatus.paid.value
        ledger.transfer_id = transfer_id
        ledger.paid_at = now
        await self.repos.chef_payouts.update(ledger)
        await self._sync_paid(booking, assignment, ledger)

        logger.info(f"Chef payout completed: {amount_cents} cents to chef {chef.id} for booking {booking_id}")
        log_payout_event("chef", "created", booking_id, amount_cents, transfer_id=transfer_id)
        return PayoutResult(success=True, payout_created=True, payout_id=ledger.id, transfer_id=transfer_id)

    async def _sync_paid(self, booking: BookingInquiry, assignment: BookingChef, ledger: ChefPayout) -> None:
        """Mirror a paid ledger row onto the assignment and the booking."""
        paid_at = ledger.paid_at or utc_now()
        assignment.payout_status = PayoutStatus.paid.value
        assignment.transfer_id = ledger.transfer_id
        await self.repos.chef_assignments.update(assignment)

        booking.chef_payout_status = PayoutStatus.paid.value
        booking.chef_payout_amount_cents = ledger.amount_cents
        booking.chef_paid_at = paid_at
        booking.stripe_transfer_id = ledger.transfer_id
        booking.set_blockers_list([])
        await self.repos.bookings.update(booking)

    # ------------------------------------------------------------------
    # Farmer assignments
    # ------------------------------------------------------------------

    async def try_farmer_payout(self, booking_farmer_id: str) -> PayoutResult:
        assignment = await self.repos.farmer_assignments.get_by_id(booking_farmer_id)
        if assignment is None:
            return PayoutResult(success=False, error="Booking farmer assignment not found")
        ref = assignment.id

        if assignment.payout_status == PayoutStatus.paid.value or assignment.transfer_id:
            return PayoutResult(
                success=True, reference_id=ref, transfer_id=assignment.transfer_id, message=ALREADY_COMPLETED
            )
        if assignment.payout_status == PayoutStatus.on_hold.value:
            return PayoutResult(success=True, reference_id=ref, blockers=[ASSIGNMENT_ON_HOLD])

        booking = await self.repos.bookings.get_by_id(assignment.booking_id)
        if booking is None:
            return PayoutResult(success=False, reference_id=ref, error="Booking not found")
        if booking.payout_hold:
            return PayoutResult(success=True, reference_id=ref, blockers=[BOOKING_ON_HOLD])
        if not booking.is_job_completed:
            return PayoutResult(success=True, reference_id=ref, blockers=[JOB_NOT_COMPLETED])
        if not booking.is_fully_paid:
            return PayoutResult(success=True, reference_id=ref, blockers=[NOT_FULLY_PAID])

        farmer = await self.repos.farmers.get_by_id(assignment.farmer_id)
        if farmer is None:
            return PayoutResult(success=False, reference_id=ref, error="Farmer not found", blockers=["Farmer not found"])

        blockers = await self.account_blockers(farmer, "Farmer")
        if blockers:
            assignment.payout_status = PayoutStatus.on_hold.value
            assignment.payout_error = "; ".join(blockers)
            await self.repos.farmer_assignments.update(assignment)
            log_payout_event("farmer", "blocked", ref, assignment.payout_amount_cents, blockers=blockers)
            return PayoutResult(success=True, reference_id=ref, blockers=blockers)

        amount_cents = assignment.payout_amount_cents or 0
        if amount_cents <= 0:
            return PayoutResult(success=False, reference_id=ref, error=ZERO_AMOUNT, blockers=[ZERO_AMOUNT])

        try:
            transfer_id = await self._transfer(
                amount_cents=amount_cents,
                destination=farmer.payout_account_id or "",
                description=f"Payout for booking {booking.name} ({assignment.role}) - {booking.id[:8]}",
                metadata={"booking_id": booking.id, "farmer_id": farmer.id, "booking_farmer_id": ref},
                idempotency_key=transfer_key("farmer-payout", ref, assignment.payout_failures),
            )
        except PaymentsApiError as e:
            error = str(e) or "Transfer creation failed"
            assignment.payout_status = PayoutStatus.failed.value
            assignment.payout_error = error
            assignment.payout_failures += 1
            await self.repos.farmer_assignments.update(assignment)
            logger.error(f"Farmer payout transfer failed for assignment {ref}: {error}")
            log_payout_event("farmer", "failed", ref, amount_cents, error=error)
            return PayoutResult(success=False, reference_id=ref, error=error, blockers=[error])

        assignment.payout_status = PayoutStatus.paid.value
        assignment.transfer_id = transfer_id
        assignment.paid_at = utc_now()
        assignment.payout_error = None
        await self.repos.farmer_assignments.update(assignment)

        logger.info(f"Farmer payout completed: {amount_cents} cents to farmer {farmer.id} ({assignment.role})")
        log_payout_event("farmer", "created", ref, amount_cents, transfer_id=transfer_id)
        return PayoutResult(success=True, payout_created=True, reference_id=ref, transfer_id=transfer_id)

    async def try_farmer_payouts(self, booking_id: str) -> List[PayoutResult]:
        """Attempt payouts for every pending farmer assignment of a booking."""
        pending = await self.repos.farmer_assignments.list_for_booking(
            booking_id, payout_statuses=[PayoutStatus.pending.value]
        )
        # Sequential: all attempts share one database session
        return [await self.try_farmer_payout(assignment.id) for assignment in pending]

    # ------------------------------------------------------------------
    # Ingredient orders
    # ------------------------------------------------------------------

    async def try_ingredient_payout(self, booking_ingredient_id: str) -> PayoutResult:
        order = await self.repos.booking_ingredients.get_by_id(booking_ingredient_id)
        if order is None:
            return PayoutResult(success=False, error="Booking ingredient not found")
        ref = order.id

        if order.payout_status == PayoutStatus.paid.value or order.transfer_id:
            return PayoutResult(success=True, reference_id=ref, transfer_id=order.transfer_id, message=ALREADY_COMPLETED)
        if order.payout_status == PayoutStatus.on_hold.value:
            return PayoutResult(success=True, reference_id=ref, blockers=[ASSIGNMENT_ON_HOLD])
        if order.fulfillment_status not in (FulfillmentStatus.delivered.value, FulfillmentStatus.paid.value):
            return PayoutResult(
                success=True,
                reference_id=ref,
                blockers=[f"Ingredient not delivered (status: {order.fulfillment_status})"],
            )

        booking = await self.repos.bookings.get_by_id(order.booking_id)
        if booking is None:
            return PayoutResult(success=False, reference_id=ref, error="Booking not found")
        if booking.payout_hold:
            return PayoutResult(success=True, reference_id=ref, blockers=[BOOKING_ON_HOLD])
        if not booking.is_job_completed and order.fulfillment_status != FulfillmentStatus.paid.value:
            return PayoutResult(success=True, reference_id=ref, blockers=[INGREDIENT_JOB_NOT_COMPLETED])

        farmer = await self.repos.farmers.get_by_id(order.farmer_id)
        if farmer is None:
            return PayoutResult(success=False, reference_id=ref, error="Farmer not found", blockers=["Farmer not found"])

        blockers = await self.account_blockers(farmer, "Farmer")
        if blockers:
            order.payout_status = PayoutStatus.on_hold.value
            await self.repos.booking_ingredients.update(order)
            log_payout_event("ingredient", "blocked", ref, order.total_cents, blockers=blockers)
            return PayoutResult(success=True, reference_id=ref, blockers=blockers)

        amount_cents = order.total_cents or 0
        if amount_cents <= 0:
            return PayoutResult(success=False, reference_id=ref, error=ZERO_AMOUNT, blockers=[ZERO_AMOUNT])

        try:
            transfer_id = await self._transfer(
                amount_cents=amount_cents,
                destination=farmer.payout_account_id or "",
                description=f"Ingredient payout for {order.ingredient_id} - {booking.id[:8]}",
                metadata={"booking_id": booking.id, "farmer_id": farmer.id, "booking_ingredient_id": ref},
                idempotency_key=transfer_key("ingredient-payout", ref, order.payout_failures),
            )
        except PaymentsApiError as e:
            error = str(e) or "Transfer creation failed"
            order.payout_status = PayoutStatus.failed.value
            order.payout_failures += 1
            await self.repos.booking_ingredients.update(order)
            logger.error(f"Ingredient payout transfer failed for order {ref}: {error}")
            log_payout_event("ingredient", "failed", ref, amount_cents, error=error)
            return PayoutResult(success=False, reference_id=ref, error=error, blockers=[error])

        order.payout_status = PayoutStatus.paid.value
        order.fulfillment_status = FulfillmentStatus.paid.value
        order.transfer_id = transfer_id
        order.paid_at = utc_now()
        await self.repos.booking_ingredients.update(order)

        logger.info(f"Ingredient payout completed: {amount_cents} cents to farmer {farmer.id} for order {ref}")
        log_payout_event("ingredient", "created", ref, amount_cents, transfer_id=transfer_id)
        return PayoutResult(success=True, payout_created=True, reference_id=ref, transfer_id=transfer_id)

    async def try_ingredient_payouts(self, booking_id: str) -> List[PayoutResult]:
        """Attempt payouts for every pending, deliverable ingredient order of a booking."""
        orders = await self.repos.booking_ingredients.list_for_booking(
            booking_id,
            payout_statuses=[PayoutStatus.pending.value],
            fulfillment_statuses=[FulfillmentStatus.delivered.value, FulfillmentStatus.paid.value],
        )
        return [await self.try_ingredient_payout(order.id) for order in orders]


def describe_result(result: PayoutResult) -> Optional[str]:
    """One-line summary of a payout attempt, for logs."""
    if result.payout_created:
        return f"paid (transfer {result.transfer_id})"
    if result.blockers:
        return "blocked: " + "; ".join(result.blockers)
    return result.error or result.message
