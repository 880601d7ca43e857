from __future__ import annotations

import uuid
from typing import Iterable, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.db.repository import Page, Repository, paginate

from .models import Document


def parse_id(raw: object) -> Optional[uuid.UUID]:
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except (TypeError, ValueError):
        return None


class DocumentRepository(Repository[Document]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Document)

    async def get_by_id(self, raw_id: object) -> Optional[Document]:
        doc_id = parse_id(raw_id)
        if doc_id is None:
            return None
        return await self.get(doc_id)

    async def get_many_by_ids(self, raw_ids: Iterable[object]) -> Sequence[Document]:
        ids = [i for i in (parse_id(r) for r in raw_ids) if i is not None]
        return await self.get_many(ids)

    async def list_owned(self, owner_id: str, *, q: Optional[str] = None, limit: int = 50, offset: int = 0) -> Page:
        stmt = select(Document).where(Document.created_by == owner_id)
        if q:
            stmt = stmt.where(Document.title.icontains(q, autoescape=True))
        stmt = stmt.order_by(Document.created_at.desc(), Document.id)
        return await paginate(self.session, stmt, limit=limit, offset=offset)
