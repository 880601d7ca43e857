"""Document use cases: upload, list, preview, extract, download, delete.

Uploads write the object before the row; deletes remove the object before the
row. Nothing is compensated: a failed row insert leaves the stored
object behind (reported with its key), and a failed row delete after the
object is gone is surfaced so the caller can retry.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.exceptions import (
    DatabaseError,
    InvalidFileTypeError,
    StorageError,
    ValidationError,
)
from docvault.reporting import ErrorReporter, LoggingErrorReporter
from docvault.storage import StorageBackend, StorageBackendError

from . import classifier
from .extraction import extract_text, preview_text
from .keys import build_storage_key
from .policy import ensure_owner, owned_only
from .repository import DocumentRepository
from .schemas import (
    BulkDeleteResponse,
    DeleteResponse,
    DocumentList,
    DocumentListItem,
    DocumentOut,
    DownloadResponse,
    ExtractResponse,
    PreviewResponse,
    UploadResponse,
)
from .settings import DocumentSettings, get_document_settings
from .validation import validate_upload

if TYPE_CHECKING:
    from docvault.auth.session import Principal

logger = logging.getLogger(__name__)

# local disk backends surface OSError directly
STORAGE_FAILURES = (StorageBackendError, OSError)


class DocumentService:
    def __init__(
        self,
        session: AsyncSession,
        storage: StorageBackend,
        *,
        reporter: Optional[ErrorReporter] = None,
        settings: Optional[DocumentSettings] = None,
    ):
        self.session = session
        self.storage = storage
        self.repo = DocumentRepository(session)
        self.reporter = reporter or LoggingErrorReporter()
        self.settings = settings or get_document_settings()

    async def upload(
        self,
        principal: "Principal",
        data: Optional[bytes],
        filename: Optional[str],
        content_type: Optional[str],
        title: Optional[str],
    ) -> UploadResponse:
        clean_title = validate_upload(
            data,
            content_type,
            title,
            max_bytes=self.settings.max_upload_bytes,
            allowed_types=self.settings.allowed_types,
        )
        if not classifier.mime_matches_extension(content_type, filename or ""):
            self.reporter.warn(
                f"Declared type {content_type} does not match file name {filename!r}",
                owner_id=principal.id,
            )

        key = build_storage_key(filename)
        try:
            await self.storage.put(key, data, content_type, {"owner": principal.id})
        except STORAGE_FAILURES as exc:
            err = StorageError("Failed to upload file. Please try again.", original_error=exc)
            self.reporter.report(err, owner_id=principal.id, storage_path=key)
            raise err from exc

        try:
            doc = await self.repo.create(
                title=clean_title,
                storage_path=key,
                file_size_bytes=len(data),
                created_by=principal.id,
            )
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            err = DatabaseError("Failed to save document. Please try again.", original_error=exc)
            # the object stays in the bucket; its key is the only trace of it
            self.reporter.report(err, owner_id=principal.id, storage_path=key)
            logger.error("Orphaned storage object left after failed insert: %s", key, extra={"storage_path": key})
            raise err from exc

        logger.info("Document uploaded", extra={"document_id": str(doc.id), "owner_id": principal.id})
        return UploadResponse(document=DocumentOut.model_validate(doc))

    async def list(
        self,
        principal: "Principal",
        *,
        q: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> DocumentList:
        try:
            page = await self.repo.list_owned(principal.id, q=(q or "").strip() or None, limit=limit, offset=offset)
        except SQLAlchemyError as exc:
            err = DatabaseError("Failed to load documents. Please try again.", original_error=exc)
            self.reporter.report(err, owner_id=principal.id)
            raise err from exc
        items = [
            DocumentListItem(
                **DocumentOut.model_validate(doc).model_dump(),
                kind=classifier.file_kind(doc.storage_path),
                previewable=classifier.is_previewable(doc.storage_path),
            )
            for doc in page.items
        ]
        return DocumentList(documents=items, total=page.total)

    async def _owned(self, principal: "Principal", doc_id: object):
        try:
            doc = await self.repo.get_by_id(doc_id)
        except SQLAlchemyError as exc:
            err = DatabaseError("Failed to load document. Please try again.", original_error=exc)
            self.reporter.report(err, owner_id=principal.id)
            raise err from exc
        return ensure_owner(doc, principal)

    async def _download(self, principal: "Principal", key: str) -> bytes:
        try:
            return await self.storage.get(key)
        except STORAGE_FAILURES as exc:
            err = StorageError("Failed to read file. Please try again.", original_error=exc)
            self.reporter.report(err, owner_id=principal.id, storage_path=key)
            raise err from exc

    async def preview(self, principal: "Principal", doc_id: object) -> PreviewResponse:
        doc = await self._owned(principal, doc_id)
        extension = classifier.file_extension(doc.storage_path)
        if not classifier.is_previewable(doc.storage_path):
            raise ValidationError("Preview is only available for text and Markdown files")

        data = await self._download(principal, doc.storage_path)
        result = preview_text(data, max_bytes=self.settings.preview_max_bytes)
        return PreviewResponse(
            content=result.text,
            title=doc.title,
            extension=extension,
            truncated=result.truncated,
            total_bytes=doc.file_size_bytes,
        )

    async def extract(self, principal: "Principal", doc_id: object) -> ExtractResponse:
        doc = await self._owned(principal, doc_id)
        mime = classifier.mime_type_for(doc.storage_path)
        if mime not in ("text/plain", "text/markdown", "application/pdf"):
            raise InvalidFileTypeError("Text extraction is not supported for this file type")

        data = await self._download(principal, doc.storage_path)
        result = extract_text(data, mime, max_chars=self.settings.extract_max_chars)
        if result is None:
            raise InvalidFileTypeError("No text could be extracted from this file")
        return ExtractResponse(
            text=result.text,
            truncated=result.truncated,
            title=doc.title,
            extension=classifier.file_extension(doc.storage_path),
        )

    async def signed_download(self, principal: "Principal", doc_id: object) -> DownloadResponse:
        doc = await self._owned(principal, doc_id)
        try:
            url = await self.storage.get_url(doc.storage_path, expires_in=self.settings.signed_url_ttl, download=True)
        except STORAGE_FAILURES as exc:
            err = StorageError("Failed to create download link. Please try again.", original_error=exc)
            self.reporter.report(err, owner_id=principal.id, storage_path=doc.storage_path)
            raise err from exc
        return DownloadResponse(url=url, title=doc.title)

    async def delete(self, principal: "Principal", doc_id: object) -> DeleteResponse:
        doc = await self._owned(principal, doc_id)
        key = doc.storage_path
        ctx = {"owner_id": principal.id, "document_id": str(doc.id), "storage_path": key}

        try:
            await self.storage.delete(key)
        except STORAGE_FAILURES as exc:
            err = StorageError("Failed to delete file. Please try again.", original_error=exc)
            self.reporter.report(err, **ctx)
            raise err from exc

        try:
            await self.repo.delete(doc.id)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            err = DatabaseError(
                "File was removed but the record could not be deleted. Please try again.",
                details={"objectRemoved": True},
                original_error=exc,
            )
            self.reporter.report(err, **ctx)
            raise err from exc

        logger.info("Document deleted", extra=ctx)
        return DeleteResponse()

    def _check_bulk_ids(self, ids: object) -> list[str]:
        limit = self.settings.bulk_delete_max
        if not isinstance(ids, (list, tuple)) or not all(isinstance(i, str) for i in ids):
            raise ValidationError("ids must be a list of document ids")
        if not ids:
            raise ValidationError("No documents selected")
        if len(ids) > limit:
            raise ValidationError(
                f"Cannot delete more than {limit} documents at once",
                details={"maxItems": limit, "provided": len(ids)},
            )
        return list(dict.fromkeys(ids))

    async def delete_many(self, principal: "Principal", ids: Sequence[str]) -> BulkDeleteResponse:
        """Delete every listed document the caller owns; the rest are ignored."""
        unique_ids = self._check_bulk_ids(ids)

        try:
            found = await self.repo.get_many_by_ids(unique_ids)
        except SQLAlchemyError as exc:
            err = DatabaseError("Failed to load documents. Please try again.", original_error=exc)
            self.reporter.report(err, owner_id=principal.id)
            raise err from exc

        owned = owned_only(found, principal)
        if len(owned) < len(found):
            logger.warning(
                "Bulk delete skipped %d document(s) not owned by caller",
                len(found) - len(owned),
                extra={"owner_id": principal.id},
            )
        if not owned:
            return BulkDeleteResponse(deleted=0)

        keys = [d.storage_path for d in owned]
        try:
            await self.storage.delete_many(keys)
        except STORAGE_FAILURES as exc:
            err = StorageError("Failed to delete files. Please try again.", original_error=exc)
            self.reporter.report(err, owner_id=principal.id)
            raise err from exc

        try:
            await self.repo.delete_many([d.id for d in owned])
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            err = DatabaseError(
                "Files were removed but some records could not be deleted. Please try again.",
                details={"objectRemoved": True},
                original_error=exc,
            )
            self.reporter.report(err, owner_id=principal.id)
            raise err from exc

        logger.info("Bulk delete removed %d document(s)", len(owned), extra={"owner_id": principal.id})
        return BulkDeleteResponse(deleted=len(owned))
