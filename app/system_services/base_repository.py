# app/system_services/base_repository.py
from typing import Any, Dict, Generic, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Per-entity data access over one request-scoped AsyncSession.

    Writes only ``flush``; the calling service decides when to ``commit``
    so a multi-row change (antibiotic + its review alerts) lands atomically.
    """

    model: Type[ModelT]

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, entity_id: int) -> Optional[ModelT]:
        return await self.db.get(self.model, entity_id)

    async def add(self, obj: ModelT) -> ModelT:
        self.db.add(obj)
        await self.db.flush()
        return obj

    async def create(self, data: Dict[str, Any]) -> ModelT:
        return await self.add(self.model(**data))

    async def update(self, obj: ModelT, changes: Dict[str, Any]) -> ModelT:
        for key, value in changes.items():
            setattr(obj, key, value)
        await self.db.flush()
        return obj

    async def commit(self) -> None:
        await self.db.commit()

    async def refresh(self, obj: ModelT) -> ModelT:
        await self.db.refresh(obj)
        return obj
