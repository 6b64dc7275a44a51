# app/services/base_service.py
"""Base service with common CRUD operations."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Type, Any, Dict, Optional, List, TypeVar, Generic

T = TypeVar('T')


class BaseService(Generic[T]):
    def __init__(self, model: Type[T], db: AsyncSession):
        self.model = model
        self.db = db

    def _filtered(self, stmt, filters: Dict[str, Any]):
        # Unknown columns and None values are ignored so routers can pass optional query params straight through
        for key, value in filters.items():
            if value is not None and hasattr(self.model, key):
                stmt = stmt.where(getattr(self.model, key) == value)
        return stmt

    async def get(self, id: Any) -> Optional[T]:
        return await self.db.get(self.model, id)

    async def get_multi(self, order_by: str = None, sort: str = "asc", **filters) -> List[T]:
        stmt = self._filtered(select(self.model), filters)

        if order_by and hasattr(self.model, order_by):
            column = getattr(self.model, order_by)
            stmt = stmt.order_by(column.desc() if sort.lower() == "desc" else column.asc())

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_total_count(self, **filters) -> int:
        stmt = self._filtered(select(func.count()).select_from(self.model), filters)
        result = await self.db.execute(stmt)
        return result.scalar()

    async def create(self, obj_in: Dict[str, Any]) -> T:
        obj = self.model(**obj_in)
        self.db.add(obj)
        await self.db.commit()
        await self.db.refresh(obj)
        return obj

    async def update(self, id: Any, obj_in: Dict[str, Any]) -> Optional[T]:
        obj = await self.get(id)
        if not obj:
            return None
        for key, value in obj_in.items():
            setattr(obj, key, value)
        await self.db.commit()
        await self.db.refresh(obj)
        return obj

    async def hard_delete(self, id: Any) -> bool:
        """Permanently delete a row; False when it does not exist"""
        obj = await self.get(id)
        if not obj:
            return False
        await self.db.delete(obj)
        await self.db.commit()
        return True
