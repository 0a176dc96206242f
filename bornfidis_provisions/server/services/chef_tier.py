"""
Chef tiering.

Chefs earn a rate tier from their track record:

- PRO:   certified and at least 90% on-time over the last 10 completed jobs
- ELITE: certified, prep-perfect and at least 95% on-time over the last 20

An admin ``tier_override`` always wins. The tier's multiplier is applied to
the chef's payout percent at assignment time unless tiered rates are
switched off with ``ENABLE_CHEF_TIERED_RATES=false``.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Iterable, Optional, Tuple

from bornfidis_provisions.core.database.entities.chefs import Chef
from bornfidis_provisions.core.database.repositories import SqlRepoBundle
from bornfidis_provisions.core.errors import NotFoundError
from bornfidis_provisions.core.logging_config import get_logger
from bornfidis_provisions.core.models.domain import ChefTier
from bornfidis_provisions.core.models.io.chefs import ChefTierRead

logger = get_logger(__name__)

RATE_MULTIPLIERS = {
    ChefTier.standard: 1.0,
    ChefTier.pro: 1.1,
    ChefTier.elite: 1.2,
}

TIER_LABELS = {
    ChefTier.standard: "",
    ChefTier.pro: "Pro Chef",
    ChefTier.elite: "Elite Chef",
}

TIER_ORDINALS = {
    ChefTier.standard: 1,
    ChefTier.pro: 2,
    ChefTier.elite: 3,
}

PRO_WINDOW = 10
PRO_MIN_ON_TIME = 90.0
ELITE_WINDOW = 20
ELITE_MIN_ON_TIME = 95.0


def parse_tier(value: Optional[str]) -> Optional[ChefTier]:
    """Parse a stored tier string; unknown values are treated as unset."""
    if not value:
        return None
    try:
        return ChefTier(value.strip().upper())
    except ValueError:
        logger.warning(f"Ignoring unknown chef tier value: {value!r}")
        return None


def rate_multiplier(tier: ChefTier, *, tiered_rates_enabled: bool = True) -> float:
    if not tiered_rates_enabled:
        return 1.0
    return RATE_MULTIPLIERS.get(tier, 1.0)


def tier_label(tier: ChefTier) -> str:
    return TIER_LABELS.get(tier, "")


def scheduled_at(event_date: date, event_time: Optional[str]) -> datetime:
    """Scheduled start of an event; midnight when no time is set."""
    start = time(0, 0)
    if event_time and event_time.strip():
        hours, _, minutes = event_time.strip().partition(":")
        start = time(int(hours or 0), int(minutes or 0))
    return datetime.combine(event_date, start)


def on_time_rate(completions: Iterable[Tuple[Optional[datetime], Optional[date], Optional[str]]]) -> float:
    """
    Percentage of jobs completed at or before their scheduled time.

    Args:
        completions: ``(completed_at, event_date, event_time)`` per job

    Returns:
        On-time percentage (0-100); 0 when there are no completed jobs
    """
    total = 0
    on_time = 0
    for completed_at, event_date, event_time in completions:
        if completed_at is None:
            continue
        total += 1
        if event_date is not None and completed_at <= scheduled_at(event_date, event_time):
            on_time += 1
    if total == 0:
        return 0.0
    return on_time / total * 100


def compute_tier(certified: bool, prep_perfect: bool, on_time_last_10: float, on_time_last_20: float) -> ChefTier:
    if certified and prep_perfect and on_time_last_20 >= ELITE_MIN_ON_TIME:
        return ChefTier.elite
    if certified and on_time_last_10 >= PRO_MIN_ON_TIME:
        return ChefTier.pro
    return ChefTier.standard


class ChefTierService:
    """Resolves a chef's effective tier from the database."""

    def __init__(self, repos: SqlRepoBundle, *, tiered_rates_enabled: bool = True) -> None:
        self.repos = repos
        self.tiered_rates_enabled = tiered_rates_enabled

    async def _on_time_rate(self, chef_id: str, window: int) -> float:
        rows = await self.repos.chef_assignments.list_completed_with_bookings(chef_id, window)
        return on_time_rate(
            (booking.job_completed_at or assignment.completed_at, booking.event_date, booking.event_time)
            for assignment, booking in rows
        )

    async def describe(self, chef: Chef) -> ChefTierRead:
        on_time_10 = await self._on_time_rate(chef.id, PRO_WINDOW)
        on_time_20 = await self._on_time_rate(chef.id, ELITE_WINDOW)
        computed = compute_tier(chef.certified, chef.prep_perfect, on_time_10, on_time_20)
        override = parse_tier(chef.tier_override)
        tier = override or computed
        return ChefTierRead(
            chef_id=chef.id,
            tier=tier,
            label=tier_label(tier),
            multiplier=rate_multiplier(tier, tiered_rates_enabled=self.tiered_rates_enabled),
            computed_tier=computed,
            tier_override=override,
            on_time_rate_last_10=round(on_time_10, 2),
            on_time_rate_last_20=round(on_time_20, 2),
            certified=chef.certified,
            prep_perfect=chef.prep_perfect,
        )

    async def get_chef_tier(self, chef_id: str) -> ChefTierRead:
        chef = await self.repos.chefs.get_by_id(chef_id)
        if chef is None:
            raise NotFoundError("Chef", chef_id)
        return await self.describe(chef)
