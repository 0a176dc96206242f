"""Phone number normalization to E.164.

Accepted inputs, after stripping everything but ASCII digits and ``+``:

- ``+`` followed by 10 to 15 digits is taken as already international.
- 10 digits are treated as North American (Jamaica 876/658 or US) and get ``+1``.
- 11 digits starting with ``1`` get a leading ``+``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

INVALID_PHONE_MESSAGE = "Phone number must be 10 digits (Jamaica: 876 or 658 prefix, US: any 10 digits)"

_INTERNATIONAL = re.compile(r"\+[0-9]{10,15}")


@dataclass(frozen=True)
class PhoneResult:
    valid: bool
    e164: Optional[str] = None
    error: Optional[str] = None


def normalize_phone(raw: Optional[str]) -> PhoneResult:
    """Normalize a user-entered phone number.

    Args:
        raw: Phone number as typed, e.g. ``"(876) 555-1234"``.

    Returns:
        PhoneResult with ``e164`` set when valid, otherwise ``error``.
    """
    cleaned = re.sub(r"[^0-9+]", "", raw or "")
    if not cleaned:
        return PhoneResult(valid=False, error=INVALID_PHONE_MESSAGE)

    if cleaned.startswith("+"):
        if _INTERNATIONAL.fullmatch(cleaned):
            return PhoneResult(valid=True, e164=cleaned)
        return PhoneResult(valid=False, error=INVALID_PHONE_MESSAGE)

    digits = cleaned.replace("+", "")
    if len(digits) == 10:
        return PhoneResult(valid=True, e164=f"+1{digits}")
    if len(digits) == 11 and digits.startswith("1"):
        return PhoneResult(valid=True, e164=f"+{digits}")
    return PhoneResult(valid=False, error=INVALID_PHONE_MESSAGE)
