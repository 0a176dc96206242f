"""
Impact repository.

Data access for impact events, cooperative members and member trainings.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from sqlalchemy import delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.impact import CooperativeMember, ImpactEvent, MemberTraining
from .base import SqlModelRepository


class ImpactEventRepository(SqlModelRepository[ImpactEvent]):
    """Repository for impact events."""

    default_order = "created_at"
    default_descending = True

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ImpactEvent)

    async def replace_for_booking(self, booking_id: str, events: List[ImpactEvent]) -> List[ImpactEvent]:
        """Replace every event recorded for a booking in one transaction."""
        await self.session.execute(delete(ImpactEvent).where(ImpactEvent.booking_id == booking_id))
        self.session.add_all(events)
        await self.session.commit()
        return events

    async def totals_by_metric(self) -> List[Tuple[str, str, str | None, float, int]]:
        """Aggregate events as ``(type, metric, unit, total, count)`` rows."""
        stmt = (
            select(
                ImpactEvent.type,
                ImpactEvent.metric,
                ImpactEvent.unit,
                func.sum(ImpactEvent.value),
                func.count(),
            )
            .group_by(ImpactEvent.type, ImpactEvent.metric, ImpactEvent.unit)
            .order_by(ImpactEvent.type, ImpactEvent.metric)
        )
        result = await self.session.execute(stmt)
        return [(r[0], r[1], r[2], float(r[3] or 0), int(r[4])) for r in result.all()]

    async def count_referencing(self, reference_ids: Iterable[str]) -> int:
        ids = [i for i in reference_ids if i]
        if not ids:
            return 0
        stmt = select(func.count()).select_from(ImpactEvent).where(ImpactEvent.reference_id.in_(ids))  # type: ignore
        result = await self.session.execute(stmt)
        return int(result.scalar_one())


class CooperativeMemberRepository(SqlModelRepository[CooperativeMember]):
    """Repository for cooperative members and their trainings."""

    default_order = "name"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CooperativeMember)

    async def list_active(self) -> List[CooperativeMember]:
        return await self._all(select(CooperativeMember).where(CooperativeMember.status == "active"))

    async def count_completed_trainings(self, member_id: str) -> int:
        stmt = select(func.count()).select_from(MemberTraining).where(
            (MemberTraining.member_id == member_id) & (MemberTraining.completed_at.is_not(None))  # type: ignore
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def save_scores(self, scores: Dict[str, int]) -> int:
        """Persist impact scores for several members at once."""
        if not scores:
            return 0
        members = await self._all(
            select(CooperativeMember).where(or_(*[CooperativeMember.id == member_id for member_id in scores]))
        )
        for member in members:
            member.impact_score = scores[member.id]
            self.session.add(member)
        await self.session.commit()
        return len(members)
