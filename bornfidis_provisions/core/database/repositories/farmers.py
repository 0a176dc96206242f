"""
Farmers repository.

Data access for farmers, their crops and join-form applications.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.farmers import Farmer, FarmerApplication, FarmerCrop
from .base import SqlModelRepository


class FarmerRepository(SqlModelRepository[Farmer]):
    """Repository for farmer data access operations."""

    default_order = "name"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Farmer)

    async def add_crops(self, farmer_id: str, crops: List[str]) -> List[FarmerCrop]:
        rows = [FarmerCrop(farmer_id=farmer_id, crop=crop) for crop in crops]
        self.session.add_all(rows)
        await self.session.commit()
        return rows

    async def list_with_crops(self, status: str = "approved") -> List[Tuple[Farmer, List[str]]]:
        """List farmers with ``status`` together with the crops each grows.

        Args:
            status: Farmer status to include

        Returns:
            List of ``(farmer, crops)`` pairs ordered by farmer name
        """
        farmers = await self._all(select(Farmer).where(Farmer.status == status).order_by(Farmer.name.asc()))  # type: ignore
        if not farmers:
            return []

        result = await self.session.execute(
            select(FarmerCrop).where(FarmerCrop.farmer_id.in_([f.id for f in farmers]))  # type: ignore
        )
        crops_by_farmer: Dict[str, List[str]] = defaultdict(list)
        for row in result.scalars().all():
            crops_by_farmer[row.farmer_id].append(row.crop)
        return [(farmer, crops_by_farmer.get(farmer.id, [])) for farmer in farmers]


class FarmerApplicationRepository(SqlModelRepository[FarmerApplication]):
    """Repository for applications from the farmer join form."""

    default_order = "created_at"
    default_descending = True

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, FarmerApplication)
