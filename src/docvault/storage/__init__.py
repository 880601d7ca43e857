from fastapi import Request

from .base import (
    FileNotFoundError,
    InvalidKeyError,
    PermissionDeniedError,
    QuotaExceededError,
    StorageBackend,
    StorageBackendError,
)
from .backends import LocalBackend, MemoryBackend, S3Backend
from .easy import easy_storage
from .settings import StorageSettings
from .signing import URLSigner


def get_storage(request: Request) -> StorageBackend:
    return request.app.state.storage  # type: ignore[attr-defined]


__all__ = [
    "StorageBackend",
    "StorageBackendError",
    "FileNotFoundError",
    "InvalidKeyError",
    "PermissionDeniedError",
    "QuotaExceededError",
    "LocalBackend",
    "MemoryBackend",
    "S3Backend",
    "StorageSettings",
    "URLSigner",
    "easy_storage",
    "get_storage",
]
