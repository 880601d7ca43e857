from __future__ import annotations

from typing import Any, Generic, Iterable, Optional, TypeVar

from sqlalchemy import and_, delete

T = TypeVar("T")


class CRUDMixin(Generic[T]):
    async def create(self, **data) -> T:  # type: ignore[override]
        obj = self.model(**data)  # type: ignore[attr-defined]
        self.session.add(obj)     # type: ignore[attr-defined]
        await self.session.flush()  # type: ignore[attr-defined]
        return obj

    async def delete(self, id: Any) -> int:  # type: ignore[override]
        cond = self.model.id == id  # type: ignore[attr-defined]
        res = await self.session.execute(delete(self.model).where(cond))  # type: ignore[attr-defined]
        return int(res.rowcount or 0)

    async def delete_many(self, ids: Iterable[Any]) -> int:
        ids = list(ids)
        if not ids:
            return 0
        cond = self.model.id.in_(ids)  # type: ignore[attr-defined]
        res = await self.session.execute(delete(self.model).where(cond))  # type: ignore[attr-defined]
        return int(res.rowcount or 0)


def apply_filters(stmt, model, where: Optional[dict[str, Any]]):
    if not where:
        return stmt
    return stmt.where(and_(*[(getattr(model, k) == v) for k, v in where.items()]))
