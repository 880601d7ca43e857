from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, File, Form, UploadFile

from docvault.auth import PrincipalDep
from docvault.documents.schemas import UploadResponse

from ..dependencies import DocumentServiceDep

ROUTER_PREFIX = "/api"
ROUTER_TAG = "documents"

router = APIRouter()


@router.post("/upload", response_model=UploadResponse)
async def upload_document(
    principal: PrincipalDep,
    service: DocumentServiceDep,
    file: Annotated[Optional[UploadFile], File()] = None,
    title: Annotated[Optional[str], Form()] = None,
):
    # browsers send an empty, unnamed part when no file was chosen
    data: Optional[bytes] = None
    filename = content_type = None
    if file is not None and file.filename:
        data = await file.read()
        filename, content_type = file.filename, file.content_type
    return await service.upload(principal, data, filename, content_type, title)
