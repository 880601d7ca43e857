from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from docvault.db import SessionDep
from docvault.documents import DocumentService, DocumentSettings, get_document_settings
from docvault.reporting import ErrorReporter, get_reporter
from docvault.storage import get_storage


def get_settings(request: Request) -> DocumentSettings:
    return getattr(request.app.state, "document_settings", None) or get_document_settings()


def get_document_service(
    request: Request,
    session: SessionDep,
    reporter: Annotated[ErrorReporter, Depends(get_reporter)],
) -> DocumentService:
    return DocumentService(
        session,
        get_storage(request),
        reporter=reporter,
        settings=get_settings(request),
    )


DocumentServiceDep = Annotated[DocumentService, Depends(get_document_service)]
