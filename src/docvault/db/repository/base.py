from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Iterable, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .mixins import CRUDMixin, apply_filters

T = TypeVar("T")


@dataclass
class Page:
    items: Sequence[Any]
    total: int
    limit: int
    offset: int


async def paginate(session: AsyncSession, stmt, *, limit: int = 50, offset: int = 0) -> Page:
    total = await session.scalar(select(func.count()).select_from(stmt.order_by(None).subquery()))
    items = (await session.execute(stmt.limit(limit).offset(offset))).scalars().all()
    return Page(items=items, total=int(total or 0), limit=limit, offset=offset)


class Repository(CRUDMixin[T], Generic[T]):
    """Generic async SQLAlchemy repository.

    - Exposes common read helpers over an AsyncSession and SQLAlchemy model class.
    - Create/Delete come from CRUDMixin to keep custom repos consistent.
    """

    def __init__(self, session: AsyncSession, model: Type[T]):
        self.session = session
        self.model = model

    async def get(self, id: Any) -> Optional[T]:
        stmt = apply_filters(select(self.model), self.model, {"id": id})
        return (await self.session.execute(stmt)).scalars().first()

    async def get_many(self, ids: Iterable[Any]) -> Sequence[T]:
        ids = list(ids)
        if not ids:
            return []
        stmt = select(self.model).where(self.model.id.in_(ids))  # type: ignore[attr-defined]
        return (await self.session.execute(stmt)).scalars().all()
