"""
Outbound REST clients.

- payments: connected payout accounts and transfers
- messaging: SMS and email delivery

Both clients are thin wrappers around ``httpx.AsyncClient`` that translate
HTTP failures into typed errors from ``errors``.
"""

from .errors import (
    MessagingApiError,
    MessagingNotConfiguredError,
    PaymentsAccountNotFoundError,
    PaymentsApiError,
    ServiceApiError,
)
from .messaging import MessagingClient
from .payments import AccountStatus, PaymentsClient

__all__ = [
    "AccountStatus",
    "MessagingApiError",
    "MessagingClient",
    "MessagingNotConfiguredError",
    "PaymentsAccountNotFoundError",
    "PaymentsApiError",
    "PaymentsClient",
    "ServiceApiError",
]
