"""
Chef ingredient needs and the farmers that match them.

Each need is matched against approved farmers that grow a related crop.
Scores (max 100):

- crop:   50 exact (case-insensitive), 25 partial (substring either way)
- parish: 30 when the farmer is in the chef's parish
- acres:  up to 20, linear to 100 acres
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from bornfidis_provisions.core.database.entities.chefs import ChefNeed
from bornfidis_provisions.core.database.entities.farmers import Farmer
from bornfidis_provisions.core.database.repositories import SqlRepoBundle
from bornfidis_provisions.core.errors import NotFoundError
from bornfidis_provisions.core.logging_config import get_logger
from bornfidis_provisions.core.models.domain import FarmerStatus
from bornfidis_provisions.core.models.io.chefs import ChefNeedCreate, ChefNeedRead
from bornfidis_provisions.core.models.io.farmers import FarmerMatch, NeedMatches, ScoreBreakdown

logger = get_logger(__name__)

TOP_MATCHES_PER_NEED = 5


def _norm(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def crop_match_score(needed: str, grown: str) -> int:
    a, b = _norm(needed), _norm(grown)
    if not a or not b:
        return 0
    if a == b:
        return 50
    if a in b or b in a:
        return 25
    return 0


def parish_match_score(chef_parish: Optional[str], farmer_parish: Optional[str]) -> int:
    if not _norm(chef_parish) or not _norm(farmer_parish):
        return 0
    return 30 if _norm(chef_parish) == _norm(farmer_parish) else 0


def acres_score(acres: Optional[float]) -> float:
    if not acres or acres <= 0:
        return 0.0
    return round(min(20.0, acres / 100 * 20), 2)


def best_crop(needed: str, crops: List[str]) -> Optional[Tuple[str, int]]:
    """Pick the farmer crop that best matches ``needed``."""
    best: Optional[Tuple[str, int]] = None
    for crop in crops:
        score = crop_match_score(needed, crop)
        if score and (best is None or score > best[1]):
            best = (crop, score)
    return best


def score_farmer(needed: str, chef_parish: Optional[str], farmer: Farmer, crops: List[str]) -> Optional[FarmerMatch]:
    match = best_crop(needed, crops)
    if match is None:
        return None
    crop, crop_score = match
    breakdown = ScoreBreakdown(
        crop_match=crop_score,
        parish_match=parish_match_score(chef_parish, farmer.parish),
        acres_score=acres_score(farmer.acres),
    )
    return FarmerMatch(
        farmer_id=farmer.id,
        name=farmer.name,
        phone=farmer.phone,
        parish=farmer.parish,
        acres=farmer.acres,
        crop=crop,
        match_score=round(breakdown.crop_match + breakdown.parish_match + breakdown.acres_score, 2),
        score_breakdown=breakdown,
    )


class FarmerMatchingService:
    def __init__(self, repos: SqlRepoBundle) -> None:
        self.repos = repos

    async def add_need(self, chef_id: str, request: ChefNeedCreate) -> ChefNeedRead:
        """Record an ingredient need; it is matched against farmers from then on."""
        if await self.repos.chefs.get_by_id(chef_id) is None:
            raise NotFoundError("Chef", chef_id)
        need = await self.repos.chefs.add_need(
            ChefNeed(
                chef_id=chef_id,
                crop=request.crop,
                quantity=f"{request.quantity:g}",
                frequency=request.frequency.value,
                start_date=request.start_date,
                end_date=request.end_date,
            )
        )
        logger.info(f"Chef {chef_id} needs {need.quantity} {need.crop} {need.frequency}")
        return ChefNeedRead.model_validate(need)

    async def list_needs(self, chef_id: str) -> List[ChefNeedRead]:
        if await self.repos.chefs.get_by_id(chef_id) is None:
            raise NotFoundError("Chef", chef_id)
        return [ChefNeedRead.model_validate(n) for n in await self.repos.chefs.list_needs(chef_id)]

    async def match_farmers_for_chef(self, chef_id: str) -> List[NeedMatches]:
        """
        Match every ingredient need of a chef with the best approved farmers.

        Args:
            chef_id: Chef whose needs to match

        Returns:
            One entry per need (ordered by start date) with up to five matches each

        Raises:
            NotFoundError: If the chef does not exist
        """
        chef = await self.repos.chefs.get_by_id(chef_id)
        if chef is None:
            raise NotFoundError("Chef", chef_id)

        needs = await self.repos.chefs.list_needs(chef_id)
        if not needs:
            return []

        farmers = await self.repos.farmers.list_with_crops(status=FarmerStatus.approved.value)

        results: List[NeedMatches] = []
        for need in needs:
            matches = [
                m for m in (score_farmer(need.crop, chef.parish, farmer, crops) for farmer, crops in farmers) if m
            ]
            matches.sort(key=lambda m: m.match_score, reverse=True)
            results.append(
                NeedMatches(
                    need_id=need.id,
                    crop=need.crop,
                    quantity=need.quantity,
                    frequency=need.frequency,
                    start_date=need.start_date,
                    end_date=need.end_date,
                    matches=matches[:TOP_MATCHES_PER_NEED],
                )
            )
        return results
