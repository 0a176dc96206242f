from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

from .dto import EmailRequestDTO, MessageDTO, SmsRequestDTO
from .errors import MessagingApiError, MessagingNotConfiguredError


class MessagingClient:
    """
    Thin async HTTP client for the messaging service.

    Responsibilities:
    - send_sms
    - send_email

    Retries are the caller's concern; this client makes exactly one request.
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_key: Optional[str] = None,
        sms_from: Optional[str] = None,
        email_from: str = "Bornfidis Provisions <no-reply@bornfidis.com>",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.sms_from = sms_from
        self.email_from = email_from
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._logger = logging.getLogger(__name__)

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post(self, path: str, payload: dict, operation: str) -> MessageDTO:
        try:
            r = await self._client.post(f"{self.base_url}{path}", headers=self._headers(), json=payload)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise MessagingApiError(
                f"Messaging {operation} failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.RequestError as e:
            raise MessagingApiError(f"Messaging {operation} request error: {e}") from e
        raw = r.json() if r.headers.get("content-type", "application/json").startswith("application/json") else {}
        return MessageDTO.model_validate(raw if isinstance(raw, dict) else {})

    async def send_sms(self, to: str, body: str) -> MessageDTO:
        if not self.configured:
            raise MessagingNotConfiguredError("sms")
        payload = SmsRequestDTO(to=to, body=body, sender=self.sms_from)
        self._logger.debug("MessagingClient.send_sms: POST %s/sms to=%s", self.base_url, to)
        return await self._post("/sms", payload.model_dump(by_alias=True, exclude_none=True), "send_sms")

    async def send_email(self, to: str, subject: str, html: str) -> MessageDTO:
        if not self.configured:
            raise MessagingNotConfiguredError("email")
        payload = EmailRequestDTO(to=to, subject=subject, html=html, sender=self.email_from)
        self._logger.debug("MessagingClient.send_email: POST %s/email to=%s subject=%s", self.base_url, to, subject)
        return await self._post("/email", payload.model_dump(by_alias=True), "send_email")
