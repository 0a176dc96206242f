"""
Approving providers and onboarding their payout accounts.

An approved chef or farmer is paid through a connected account at the
payments provider. Approval creates the chef or farmer from its application
and, when an email is known, opens the account and returns the onboarding
link. A provider failure during approval leaves the approval in place; the
admin starts onboarding again later.
"""

from __future__ import annotations

from typing import Optional, Union

from bornfidis_provisions.core.clients import PaymentsAccountNotFoundError, PaymentsApiError, PaymentsClient
from bornfidis_provisions.core.database.base import load_json_list
from bornfidis_provisions.core.database.entities.chefs import Chef
from bornfidis_provisions.core.database.entities.farmers import Farmer
from bornfidis_provisions.core.database.repositories import SqlRepoBundle
from bornfidis_provisions.core.errors import ConflictError, ExternalServiceError, NotFoundError, ValidationFailedError
from bornfidis_provisions.core.logging_config import get_logger
from bornfidis_provisions.core.models.domain import ChefStatus, FarmerStatus, PayoutAccountStatus
from bornfidis_provisions.core.models.io.chefs import ChefApprovalResponse, ChefRead
from bornfidis_provisions.core.models.io.common import OnboardingLinkResponse, PayoutAccountRead
from bornfidis_provisions.core.models.io.farmers import FarmerApprovalResponse, FarmerRead

logger = get_logger(__name__)

Provider = Union[Chef, Farmer]

PENDING_CHEF_APPLICATION = "pending"
PENDING_FARMER_APPLICATION = "new"
APPROVED_APPLICATION = "approved"


class OnboardingService:
    def __init__(self, repos: SqlRepoBundle, payments: PaymentsClient, *, app_base_url: str) -> None:
        self.repos = repos
        self.payments = payments
        self.app_base_url = app_base_url.rstrip("/")

    def portal_url(self, kind: str, provider_id: str, state: str) -> str:
        return f"{self.app_base_url}/{kind}/portal/{provider_id}?onboarding={state}"

    # ------------------------------------------------------------------
    # Approval
    # ------------------------------------------------------------------

    async def approve_chef_application(self, application_id: str) -> ChefApprovalResponse:
        """
        Turn a pending chef application into an approved chef.

        Raises:
            NotFoundError: Unknown application
            ValidationFailedError: Application already reviewed
            ConflictError: A chef with the same email exists
        """
        application = await self.repos.chef_applications.get_by_id(application_id)
        if application is None:
            raise NotFoundError("Chef application", application_id)
        if application.status != PENDING_CHEF_APPLICATION:
            raise ValidationFailedError(f"Application is already {application.status}")
        if await self.repos.chefs.get_by_email(application.email) is not None:
            raise ConflictError("A chef with this email already exists")

        chef = await self.repos.chefs.create(
            Chef(
                name=application.name,
                email=application.email,
                phone=application.phone,
                bio=application.bio,
                specialties=application.specialties,
                certifications=application.certifications,
                status=ChefStatus.approved.value,
            )
        )
        application.status = APPROVED_APPLICATION
        await self.repos.chef_applications.update(application)
        logger.info(f"Approved chef application {application_id} as chef {chef.id}")

        onboarding_url = await self._try_onboarding(chef, "chef")
        return ChefApprovalResponse(
            chef=ChefRead.model_validate(chef),
            onboarding_url=onboarding_url,
            message=_approval_message("Chef", True, onboarding_url),
        )

    async def approve_farmer_application(
        self, application_id: str, email: Optional[str] = None
    ) -> FarmerApprovalResponse:
        """
        Turn a join-form application into an approved farmer with its crops.

        The join form collects no email, so payout onboarding only starts
        when the admin supplies one here.
        """
        application = await self.repos.farmer_applications.get_by_id(application_id)
        if application is None:
            raise NotFoundError("Farmer application", application_id)
        if application.status != PENDING_FARMER_APPLICATION:
            raise ValidationFailedError(f"Application is already {application.status}")

        farmer = await self.repos.farmers.create(
            Farmer(
                name=application.name,
                email=email,
                phone=application.phone,
                parish=application.parish,
                acres=application.acres,
                status=FarmerStatus.approved.value,
            )
        )
        crops = load_json_list(application.crops)
        if crops:
            await self.repos.farmers.add_crops(farmer.id, crops)
        application.status = APPROVED_APPLICATION
        await self.repos.farmer_applications.update(application)
        logger.info(f"Approved farmer application {application_id} as farmer {farmer.id}")

        onboarding_url = await self._try_onboarding(farmer, "farmer") if email else None
        return FarmerApprovalResponse(
            farmer=FarmerRead.model_validate(farmer),
            crops=crops,
            onboarding_url=onboarding_url,
            message=_approval_message("Farmer", bool(email), onboarding_url),
        )

    # ------------------------------------------------------------------
    # Onboarding
    # ------------------------------------------------------------------

    async def start_chef_onboarding(self, chef_id: str) -> OnboardingLinkResponse:
        chef = await self._chef(chef_id)
        return await self._start_onboarding(chef, "chef")

    async def start_farmer_onboarding(self, farmer_id: str) -> OnboardingLinkResponse:
        farmer = await self._farmer(farmer_id)
        if not farmer.email:
            raise ValidationFailedError("Farmer email is required for payout onboarding")
        return await self._start_onboarding(farmer, "farmer")

    async def refresh_chef_account(self, chef_id: str) -> PayoutAccountRead:
        return await self._refresh_account(await self._chef(chef_id), "Chef")

    async def refresh_farmer_account(self, farmer_id: str) -> PayoutAccountRead:
        return await self._refresh_account(await self._farmer(farmer_id), "Farmer")

    async def _chef(self, chef_id: str) -> Chef:
        chef = await self.repos.chefs.get_by_id(chef_id)
        if chef is None:
            raise NotFoundError("Chef", chef_id)
        return chef

    async def _farmer(self, farmer_id: str) -> Farmer:
        farmer = await self.repos.farmers.get_by_id(farmer_id)
        if farmer is None:
            raise NotFoundError("Farmer", farmer_id)
        return farmer

    async def _save(self, provider: Provider) -> Provider:
        if isinstance(provider, Chef):
            return await self.repos.chefs.update(provider)
        return await self.repos.farmers.update(provider)

    async def _start_onboarding(self, provider: Provider, kind: str) -> OnboardingLinkResponse:
        """Create the payout account when missing, then a fresh onboarding link."""
        account_id = provider.payout_account_id
        if not account_id:
            try:
                account = await self.payments.create_account(provider.email or "")
            except PaymentsApiError as e:
                logger.error(f"Payout account creation failed for {kind} {provider.id}: {e}")
                raise ExternalServiceError("Failed to create payout account") from e
            account_id = account.id
            provider.payout_account_id = account_id
            provider.payout_account_status = PayoutAccountStatus.pending.value
            provider.payouts_enabled = False
            await self._save(provider)
            logger.info(f"Created payout account {account_id} for {kind} {provider.id}")

        try:
            url = await self.payments.create_onboarding_link(
                account_id,
                refresh_url=self.portal_url(kind, provider.id, "refresh"),
                return_url=self.portal_url(kind, provider.id, "complete"),
            )
        except PaymentsApiError as e:
            logger.error(f"Onboarding link failed for {kind} {provider.id}: {e}")
            raise ExternalServiceError("Failed to create onboarding link") from e
        return OnboardingLinkResponse(account_id=account_id, onboarding_url=url)

    async def _try_onboarding(self, provider: Provider, kind: str) -> Optional[str]:
        try:
            return (await self._start_onboarding(provider, kind)).onboarding_url
        except ExternalServiceError as e:
            logger.warning(f"Approved {kind} {provider.id} without payout onboarding: {e.message}")
            return None

    async def _refresh_account(self, provider: Provider, label: str) -> PayoutAccountRead:
        """Pull the account's capability flags from the provider and store them."""
        if not provider.payout_account_id:
            raise ValidationFailedError(f"{label} does not have a payout account")
        try:
            status = await self.payments.get_account_status(provider.payout_account_id)
        except PaymentsAccountNotFoundError:
            provider.payout_account_status = PayoutAccountStatus.not_connected.value
            provider.payouts_enabled = False
            await self._save(provider)
            raise ValidationFailedError("Payout account not found at the payments provider")
        except PaymentsApiError as e:
            logger.error(f"Payout account status check failed for {provider.payout_account_id}: {e}")
            raise ExternalServiceError("Failed to fetch payout account status") from e

        provider.payout_account_status = status.status.value
        provider.payouts_enabled = status.payouts_enabled
        await self._save(provider)
        logger.info(f"{label} {provider.id} payout account is {status.status.value}")
        return PayoutAccountRead(
            account_id=status.account_id,
            payout_account_status=status.status.value,
            payouts_enabled=status.payouts_enabled,
        )


def _approval_message(label: str, attempted: bool, onboarding_url: Optional[str]) -> str:
    if attempted and onboarding_url is None:
        return f"{label} approved, but payout onboarding could not be started"
    return f"{label} approved successfully"
