"""
BaseRepository

Base class for the ledger repositories providing common lookups.

Methods:
- find_by_id(id) -> Optional[Model]: Find single row
- find_many(limit, offset) -> list[Model]: Newest first
- insert(obj) -> Model: Add and flush, returning the persisted row
- delete(obj) -> None

Subclasses set ``model`` and add specialized queries. Repositories never
commit; the calling service owns the transaction.
"""

from typing import Generic, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from betledger.database.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    model: Type[ModelT]

    async def find_by_id(self, db: AsyncSession, id: UUID) -> Optional[ModelT]:
        result = await db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def find_many(
        self,
        db: AsyncSession,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[ModelT]:
        query = (
            select(self.model)
            .order_by(self.model.created_at.desc())
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def insert(self, db: AsyncSession, obj: ModelT) -> ModelT:
        db.add(obj)
        await db.flush()
        return obj

    async def delete(self, db: AsyncSession, obj: ModelT) -> None:
        await db.delete(obj)
        await db.flush()
