from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import httpx

from bornfidis_provisions.core.models.domain import PayoutAccountStatus

from .dto import AccountDTO, AccountLinkDTO, TransferDTO, TransferRequestDTO
from .errors import PaymentsAccountNotFoundError, PaymentsApiError


@dataclass(frozen=True)
class AccountStatus:
    """Summary of a connected account's ability to receive payouts."""

    account_id: str
    status: PayoutAccountStatus
    charges_enabled: bool
    payouts_enabled: bool
    details_submitted: bool


class PaymentsClient:
    """
    Thin async HTTP client for the payments service (connected accounts and transfers).

    Responsibilities:
    - create_account / create_onboarding_link for provider onboarding
    - get_account_status for payout eligibility checks
    - create_transfer for chef and farmer payouts

    Transfers always send an ``Idempotency-Key`` so a retried payout can never
    move money twice.
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_key: Optional[str] = None,
        currency: str = "usd",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.currency = currency
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._logger = logging.getLogger(__name__)

    def _headers(self, idempotency_key: Optional[str] = None) -> Dict[str, str]:
        headers: Dict[str, str] = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key
        return headers

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def map_account_status(account: AccountDTO) -> PayoutAccountStatus:
        """Collapse account capability flags into a single status."""
        if account.charges_enabled and account.payouts_enabled:
            return PayoutAccountStatus.connected
        if account.details_submitted:
            return PayoutAccountStatus.restricted
        return PayoutAccountStatus.pending

    async def get_account(self, account_id: str) -> AccountDTO:
        try:
            self._logger.debug("PaymentsClient.get_account: GET %s/accounts/%s", self.base_url, account_id)
            r = await self._client.get(f"{self.base_url}/accounts/{account_id}", headers=self._headers())
            if r.status_code == 404:
                raise PaymentsAccountNotFoundError(account_id)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PaymentsApiError(
                f"Payments get_account failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.RequestError as e:
            raise PaymentsApiError(f"Payments get_account request error: {e}") from e
        return AccountDTO.model_validate(r.json())

    async def get_account_status(self, account_id: str) -> AccountStatus:
        account = await self.get_account(account_id)
        status = self.map_account_status(account)
        self._logger.debug("PaymentsClient.get_account_status: %s -> %s", account_id, status.value)
        return AccountStatus(
            account_id=account.id,
            status=status,
            charges_enabled=account.charges_enabled,
            payouts_enabled=account.payouts_enabled,
            details_submitted=account.details_submitted,
        )

    async def create_account(self, email: str) -> AccountDTO:
        try:
            self._logger.debug("PaymentsClient.create_account: POST %s/accounts email=%s", self.base_url, email)
            r = await self._client.post(
                f"{self.base_url}/accounts",
                headers=self._headers(),
                json={"type": "express", "email": email},
            )
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PaymentsApiError(
                f"Payments create_account failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.RequestError as e:
            raise PaymentsApiError(f"Payments create_account request error: {e}") from e
        return AccountDTO.model_validate(r.json())

    async def create_onboarding_link(self, account_id: str, *, refresh_url: str, return_url: str) -> str:
        try:
            r = await self._client.post(
                f"{self.base_url}/account_links",
                headers=self._headers(),
                json={
                    "account": account_id,
                    "refresh_url": refresh_url,
                    "return_url": return_url,
                    "type": "account_onboarding",
                },
            )
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PaymentsApiError(
                f"Payments create_onboarding_link failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.RequestError as e:
            raise PaymentsApiError(f"Payments create_onboarding_link request error: {e}") from e
        return AccountLinkDTO.model_validate(r.json()).url

    async def create_transfer(
        self,
        *,
        amount_cents: int,
        destination: str,
        description: str,
        metadata: Optional[Dict[str, str]] = None,
        idempotency_key: Optional[str] = None,
    ) -> TransferDTO:
        payload = TransferRequestDTO(
            amount=amount_cents,
            currency=self.currency,
            destination=destination,
            description=description,
            metadata=metadata or {},
        )
        try:
            self._logger.debug(
                "PaymentsClient.create_transfer: POST %s/transfers amount=%s destination=%s key=%s",
                self.base_url,
                amount_cents,
                destination,
                idempotency_key,
            )
            r = await self._client.post(
                f"{self.base_url}/transfers",
                headers=self._headers(idempotency_key),
                json=payload.model_dump(mode="json"),
            )
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PaymentsApiError(
                f"Payments create_transfer failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.RequestError as e:
            raise PaymentsApiError(f"Payments create_transfer request error: {e}") from e
        transfer = TransferDTO.model_validate(r.json())
        self._logger.debug("PaymentsClient.create_transfer: created id=%s", transfer.id)
        return transfer
