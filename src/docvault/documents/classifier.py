"""Maps a file name or storage path to its extension, display kind and MIME type.

The stored path's extension is the only thing preview and display decisions
look at; the MIME type declared at upload is not persisted.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Optional


class FileKind(StrEnum):
    PDF = "pdf"
    IMAGE = "img"
    TEXT = "txt"
    DOC = "doc"
    FILE = "file"


KIND_BY_EXTENSION: dict[str, FileKind] = {
    "pdf": FileKind.PDF,
    "png": FileKind.IMAGE,
    "jpg": FileKind.IMAGE,
    "jpeg": FileKind.IMAGE,
    "gif": FileKind.IMAGE,
    "txt": FileKind.TEXT,
    "md": FileKind.TEXT,
    "doc": FileKind.DOC,
    "docx": FileKind.DOC,
}

PREVIEWABLE_EXTENSIONS = frozenset({"txt", "md"})

MIME_BY_EXTENSION: dict[str, str] = {
    "pdf": "application/pdf",
    "txt": "text/plain",
    "md": "text/markdown",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
}


def file_extension(path_or_name: str) -> str:
    """Lower-cased suffix after the last dot of the last path segment, or ``""``."""
    name = (path_or_name or "").replace("\\", "/").rsplit("/", 1)[-1]
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()


def file_kind(path_or_name: str) -> FileKind:
    return KIND_BY_EXTENSION.get(file_extension(path_or_name), FileKind.FILE)


def is_previewable(path_or_name: str) -> bool:
    return file_extension(path_or_name) in PREVIEWABLE_EXTENSIONS


def mime_type_for(path_or_name: str) -> Optional[str]:
    return MIME_BY_EXTENSION.get(file_extension(path_or_name))


def mime_matches_extension(mime_type: str, path_or_name: str) -> bool:
    expected = mime_type_for(path_or_name)
    if expected is None:
        return False
    return expected == (mime_type or "").split(";", 1)[0].strip().lower()
