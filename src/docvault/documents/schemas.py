from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from .classifier import FileKind


class DocumentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    storage_path: str
    file_size_bytes: int
    created_at: datetime


class DocumentListItem(DocumentOut):
    kind: FileKind
    previewable: bool


class DocumentList(BaseModel):
    documents: list[DocumentListItem]
    total: int


class UploadResponse(BaseModel):
    document: DocumentOut


class PreviewResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str
    title: str
    extension: str
    truncated: bool
    total_bytes: int = Field(alias="totalBytes")


class ExtractResponse(BaseModel):
    text: str
    truncated: bool
    title: str
    extension: str


class DownloadResponse(BaseModel):
    url: str
    title: str


class DeleteResponse(BaseModel):
    success: bool = True


class BulkDeleteRequest(BaseModel):
    ids: list[StrictStr]


class BulkDeleteResponse(BaseModel):
    success: bool = True
    deleted: int
