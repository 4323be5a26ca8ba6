"""
Base repository interfaces and utilities.

This module provides the foundational repository patterns used across all
repository implementations in the centralized database layer. All operations
are async and run on a caller-provided ``AsyncSession``.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

EntityType = TypeVar("EntityType", bound=SQLModel)


class BaseRepository(Generic[EntityType]):
    """Base async repository with common CRUD operations using SQLModel."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        """Initialize repository with async database session and SQLModel entity class.

        Args:
            session: Async SQLModel Session for database operations
            model: SQLModel entity class for this repository
        """
        self.session = session
        self.model = model

    async def create(self, entity: EntityType, *, commit: bool = True) -> EntityType:
        """Persist a new entity.

        Args:
            entity: SQLModel instance to persist
            commit: Commit immediately; otherwise only flush so generated keys are populated

        Returns:
            Persisted entity with generated fields populated
        """
        self.session.add(entity)
        if commit:
            await self.session.commit()
            await self.session.refresh(entity)
        else:
            await self.session.flush()
        return entity

    async def get_by_id(self, entity_id: Any) -> Optional[EntityType]:
        return await self.session.get(self.model, entity_id)

    async def update(self, entity: EntityType, *, commit: bool = True) -> EntityType:
        self.session.add(entity)
        if commit:
            await self.session.commit()
            await self.session.refresh(entity)
        else:
            await self.session.flush()
        return entity

    async def delete(self, entity_id: Any) -> bool:
        """Delete entity by its primary identifier.

        Returns:
            True if deleted, False if not found
        """
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        """List entities with optional pagination and equality filters."""
        stmt = select(self.model)
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, self.model, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class QueryBuilder:
    """Utility class for building SQLModel-based database queries."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """Apply equality filters, skipping ``None`` values and unknown columns."""
        for key, value in filters.items():
            if value is not None and hasattr(model, key):
                stmt = stmt.where(getattr(model, key) == value)
        return stmt

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int] = None, offset: Optional[int] = None):
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)
        return stmt

    @staticmethod
    def page_window(page: int, per_page: int) -> tuple[int, int]:
        """Return ``(limit, offset)`` for a 1-based page number."""
        page = max(page, 1)
        per_page = max(per_page, 1)
        return per_page, (page - 1) * per_page

    @staticmethod
    def total_pages(count: int, per_page: int) -> int:
        return math.ceil(count / max(per_page, 1))

    @staticmethod
    async def count(session: AsyncSession, stmt) -> int:
        """Row count of an arbitrary select statement."""
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        result = await session.execute(count_stmt)
        return int(result.scalar_one())
