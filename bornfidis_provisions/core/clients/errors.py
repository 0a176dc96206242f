"""Error types for the outbound service clients.

Purpose:
- Provide typed exceptions thrown by ``PaymentsClient`` and ``MessagingClient``.
- Expose HTTP-oriented context (status code, error body) for diagnosis.

Usage:
- Catch ``ServiceApiError`` for any downstream failure, or the specific
  subclass when only one service matters. Inspect ``status_code`` or ``details``.
"""

from __future__ import annotations

from typing import Any, Optional


class ServiceApiError(Exception):
    """Base error for outbound REST API failures.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code associated with the failure.
        details: Optional structured payload from the server (e.g., JSON body).
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class PaymentsApiError(ServiceApiError):
    """Raised when the payments service rejects or fails a request."""


class PaymentsAccountNotFoundError(PaymentsApiError):
    """Raised when a connected payout account cannot be found (HTTP 404).

    Args:
        account_id: The account identifier that was not found.
    """

    def __init__(self, account_id: str) -> None:
        super().__init__(f"Payout account not found: {account_id}", status_code=404)
        self.account_id = account_id


class MessagingApiError(ServiceApiError):
    """Raised when the messaging service fails to accept an SMS or email."""


class MessagingNotConfiguredError(MessagingApiError):
    """Raised when a message is sent but no messaging API key is configured."""

    def __init__(self, channel: str) -> None:
        super().__init__(f"Messaging is not configured for {channel}")
        self.channel = channel
