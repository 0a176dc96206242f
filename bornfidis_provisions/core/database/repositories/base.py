"""
Shared CRUD for the marketplace repositories.

Every repository wraps one SQLModel table and commits per call; services
compose calls and never hold a transaction across requests.
"""

from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

EntityType = TypeVar("EntityType", bound=SQLModel)


class SqlModelRepository(Generic[EntityType]):
    """Create/read/update/delete plus a filtered, paginated ``list``.

    Subclasses set ``default_order`` to the column ``list`` sorts on and add
    their own lookups on top of ``_all`` and ``_first``.
    """

    default_order: Optional[str] = None
    default_descending: bool = False

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        self.session = session
        self.model = model

    async def create(self, entity: EntityType) -> EntityType:
        return await self._save(entity)

    async def get_by_id(self, entity_id: str) -> Optional[EntityType]:
        return await self.session.get(self.model, entity_id)

    async def update(self, entity: EntityType) -> EntityType:
        return await self._save(entity)

    async def delete(self, entity_id: str) -> bool:
        """Delete a row; ``False`` when it was already gone."""
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        """List rows in ``default_order``.

        ``filters`` are equality matches; ``None`` values and keys that are not
        columns of the table are skipped, so query params can be passed as-is.
        """
        stmt = select(self.model)
        if self.default_order:
            column = getattr(self.model, self.default_order)
            stmt = stmt.order_by(column.desc() if self.default_descending else column.asc())

        for key, value in (filters or {}).items():
            if value is not None and hasattr(self.model, key):
                stmt = stmt.where(getattr(self.model, key) == value)

        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return await self._all(stmt)

    async def _save(self, entity: EntityType) -> EntityType:
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def _all(self, stmt) -> List[EntityType]:
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _first(self, stmt) -> Optional[EntityType]:
        result = await self.session.execute(stmt)
        return result.scalars().first()
