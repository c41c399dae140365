"""
Shared CRUD operations for the entity services.
"""
from typing import Any, Generic, Optional, Sequence, Type, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.database import Base

ModelT = TypeVar("ModelT", bound=Base)


class CrudService(Generic[ModelT]):
    """Create/read/update/delete for a single table.

    Every statement is built with SQLAlchemy expressions so values are always
    sent as bound parameters.
    """

    model: Type[ModelT]

    def __init__(self, db: AsyncSession):
        self.db = db

    def _newest_first(self, query):
        return query.order_by(self.model.created_at.desc(), self.model.id.desc())

    async def get_all(self) -> Sequence[ModelT]:
        result = await self.db.execute(self._newest_first(select(self.model)))
        return result.scalars().all()

    async def get_by_id(self, record_id: int) -> Optional[ModelT]:
        result = await self.db.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def create(self, data: dict[str, Any]) -> ModelT:
        record = self.model(**data)
        self.db.add(record)
        await self.db.commit()
        await self.db.refresh(record)
        return record

    async def update(self, record_id: int, data: dict[str, Any]) -> Optional[ModelT]:
        """Apply ``data`` to the record.

        Returns ``None`` when the record does not exist and also when ``data``
        is empty; callers report both as not found.
        """
        if not data:
            return None

        record = await self.get_by_id(record_id)
        if record is None:
            return None

        for field, value in data.items():
            setattr(record, field, value)

        await self.db.commit()
        await self.db.refresh(record)
        return record

    async def delete(self, record_id: int) -> bool:
        result = await self.db.execute(delete(self.model).where(self.model.id == record_id))
        await self.db.commit()
        return result.rowcount > 0
