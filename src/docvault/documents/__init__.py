from .classifier import FileKind, file_extension, file_kind, is_previewable, mime_type_for
from .extraction import Extraction, extract_text, preview_text
from .models import Document
from .service import DocumentService
from .settings import DocumentSettings, get_document_settings
from .validation import validate_upload

__all__ = [
    "Document",
    "DocumentService",
    "DocumentSettings",
    "Extraction",
    "FileKind",
    "extract_text",
    "file_extension",
    "file_kind",
    "get_document_settings",
    "is_previewable",
    "mime_type_for",
    "preview_text",
    "validate_upload",
]
