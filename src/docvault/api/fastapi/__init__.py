from __future__ import annotations

import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from starlette.middleware.sessions import SessionMiddleware

from docvault.app import CURRENT_ENVIRONMENT, IS_PROD
from docvault.app.core.logging import setup_logging
from docvault.app.settings import DEV_SESSION_SECRET, AppSettings, get_app_settings
from docvault.auth import IdentityClient, IdentitySettings, get_identity_settings
from docvault.db import DBEngine, attach_db
from docvault.documents import DocumentSettings, get_document_settings
from docvault.reporting import ErrorReporter, LoggingErrorReporter
from docvault.storage import StorageBackend, easy_storage

from .middleware.errors import CatchAllExceptionMiddleware, register_error_handlers
from .middleware.request_size_limit import RequestSizeLimitMiddleware
from .routers import register_all_routers

logger = logging.getLogger(__name__)

# Bodies above this many times the upload ceiling are refused before parsing,
# sized by Content-Length; smaller ones reach validation, which sees the file size.
BODY_LIMIT_FACTOR = 2
BODY_OVERHEAD_BYTES = 64 * 1024


def _gen_operation_id_factory():
    used: dict[str, int] = defaultdict(int)

    def _gen(route: APIRoute) -> str:
        base = route.name or getattr(route.endpoint, "__name__", "op")
        tag = route.tags[0] if route.tags else ""
        candidate = base
        if used[candidate] and tag and not base.startswith(str(tag)):
            candidate = f"{tag}_{base}"
        if used[candidate]:
            candidate = f"{candidate}_{used[candidate] + 1}"
        used[candidate] += 1
        return candidate

    return _gen


def create_app(
    *,
    app_settings: Optional[AppSettings] = None,
    identity_settings: Optional[IdentitySettings] = None,
    document_settings: Optional[DocumentSettings] = None,
    db_engine: Optional[DBEngine] = None,
    storage: Optional[StorageBackend] = None,
    identity: Optional[IdentityClient] = None,
    reporter: Optional[ErrorReporter] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """Build the docvault API.

    Collaborators that are passed in are used as-is (tests inject fakes);
    anything missing is built from environment settings. Missing identity
    provider configuration is a startup error.
    """
    if configure_logging:
        setup_logging()

    app_settings = app_settings or get_app_settings()
    identity_settings = identity_settings or get_identity_settings()
    identity_settings.ensure_configured()
    document_settings = document_settings or get_document_settings()
    if app_settings.session_secret.get_secret_value() == DEV_SESSION_SECRET:
        if IS_PROD:
            raise RuntimeError("APP_SESSION_SECRET must be set in production")
        logger.warning("Using the development session secret; set APP_SESSION_SECRET")

    owns_identity = identity is None
    identity = identity or IdentityClient(identity_settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        try:
            yield
        finally:
            if owns_identity:
                await identity.aclose()

    app = FastAPI(
        title=app_settings.name,
        version=app_settings.version,
        generate_unique_id_function=_gen_operation_id_factory(),
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.identity_settings = identity_settings
    app.state.document_settings = document_settings
    app.state.identity = identity
    app.state.storage = storage or easy_storage()
    app.state.reporter = reporter or LoggingErrorReporter()

    app.add_middleware(
        SessionMiddleware,
        secret_key=app_settings.session_secret.get_secret_value(),
        session_cookie=app_settings.session_cookie,
        max_age=app_settings.session_max_age,
        same_site="lax",
        https_only=app_settings.public_base_url.startswith("https://"),
    )
    app.add_middleware(
        RequestSizeLimitMiddleware,
        max_bytes=document_settings.max_upload_bytes * BODY_LIMIT_FACTOR + BODY_OVERHEAD_BYTES,
        file_limit=document_settings.max_upload_bytes,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CatchAllExceptionMiddleware)
    register_error_handlers(app)

    register_all_routers(app, base_package="docvault.api.fastapi.routers")
    attach_db(app, engine=db_engine)

    logger.info(
        "%s version of %s initialized [env: %s, storage: %s]",
        app_settings.version,
        app_settings.name,
        CURRENT_ENVIRONMENT,
        app.state.storage.name,
    )
    return app


__all__ = ["create_app"]
