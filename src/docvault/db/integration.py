from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator

from fastapi import Depends, FastAPI, Request
from sqlalchemy.ext.asyncio import AsyncSession

from .engine import DBEngine
from .settings import DBSettings, get_db_settings

logger = logging.getLogger(__name__)


def attach_db(app: FastAPI, engine: DBEngine | None = None, settings: DBSettings | None = None) -> DBEngine:
    """Put a DBEngine on ``app.state`` and dispose it when the app shuts down.

    An engine passed in by the caller is owned by the caller and is not disposed.
    """
    settings = settings or get_db_settings()
    owned = engine is None
    engine = engine or DBEngine(settings)
    app.state.db_engine = engine  # type: ignore[attr-defined]

    existing = getattr(app.router, "lifespan_context", None)  # type: ignore[attr-defined]

    @asynccontextmanager
    async def composed_lifespan(_app: FastAPI):
        url = engine.engine.url
        logger.info(
            "DB attached: url=%s driver=%s",
            url.render_as_string(hide_password=True),
            url.get_backend_name(),
        )
        if settings.create_tables:
            await engine.create_all()
            logger.info("DB tables ensured (DB_CREATE_TABLES=true)")
        try:
            if existing:
                async with existing(_app):  # type: ignore[misc]
                    yield
            else:
                yield
        finally:
            if owned:
                await engine.dispose()

    app.router.lifespan_context = composed_lifespan  # type: ignore[attr-defined]
    return engine


def get_engine(request: Request) -> DBEngine:
    return request.app.state.db_engine  # type: ignore[attr-defined]


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    engine: DBEngine = get_engine(request)
    async with engine.session() as s:
        yield s


SessionDep = Annotated[AsyncSession, Depends(get_session)]
