from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Query

from docvault.auth import PrincipalDep
from docvault.documents.schemas import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    DeleteResponse,
    DocumentList,
    DownloadResponse,
    ExtractResponse,
    PreviewResponse,
)

from ..dependencies import DocumentServiceDep

ROUTER_PREFIX = "/api"
ROUTER_TAG = "documents"

router = APIRouter()


@router.get("/documents", response_model=DocumentList)
async def list_documents(
    principal: PrincipalDep,
    service: DocumentServiceDep,
    q: Annotated[Optional[str], Query(max_length=200)] = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    return await service.list(principal, q=q, limit=limit, offset=offset)


@router.get("/documents/{document_id}/content", response_model=PreviewResponse)
async def preview_document(document_id: str, principal: PrincipalDep, service: DocumentServiceDep):
    return await service.preview(principal, document_id)


@router.get("/documents/{document_id}/text", response_model=ExtractResponse)
async def extract_document_text(document_id: str, principal: PrincipalDep, service: DocumentServiceDep):
    return await service.extract(principal, document_id)


@router.get("/documents/{document_id}/download", response_model=DownloadResponse)
async def download_document(document_id: str, principal: PrincipalDep, service: DocumentServiceDep):
    return await service.signed_download(principal, document_id)


@router.post("/documents/bulk-delete", response_model=BulkDeleteResponse)
async def bulk_delete_documents(body: BulkDeleteRequest, principal: PrincipalDep, service: DocumentServiceDep):
    return await service.delete_many(principal, body.ids)


@router.delete("/documents/{document_id}", response_model=DeleteResponse)
async def delete_document(document_id: str, principal: PrincipalDep, service: DocumentServiceDep):
    return await service.delete(principal, document_id)
