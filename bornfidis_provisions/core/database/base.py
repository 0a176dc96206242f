"""
Entity base class and column helpers shared by every table.

Timestamps are stored as naive UTC; ids are uuid4 strings.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import List

from pydantic import ConfigDict
from sqlmodel import SQLModel


class Base(SQLModel):
    """Every table model extends this instead of ``SQLModel`` directly."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


def new_id() -> str:
    """Generate a new primary key value (uuid4 string)."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Current UTC time without tzinfo, matching the stored columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def load_json_list(raw: str | None) -> List[str]:
    """Decode a JSON array column, tolerating empty or malformed values."""
    try:
        value = json.loads(raw) if raw else []
    except (json.JSONDecodeError, TypeError):
        return []
    return [str(v) for v in value] if isinstance(value, list) else []


def dump_json_list(values: List[str] | None) -> str:
    return json.dumps(list(values or []))
