"""Blob storage interface.

Backends are async and keyed by a relative path (``uploads/123-abc-report.pdf``).
Removing a key that does not exist is not an error: ``delete`` returns False
and ``delete_many`` simply skips it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional


class StorageBackendError(Exception):
    """Base error raised by storage backends."""


class FileNotFoundError(StorageBackendError):  # noqa: A001 - mirrors the builtin on purpose
    pass


class InvalidKeyError(StorageBackendError):
    pass


class PermissionDeniedError(StorageBackendError):
    pass


class QuotaExceededError(StorageBackendError):
    pass


MAX_KEY_LENGTH = 1024


def validate_key(key: str) -> str:
    if not key or not key.strip():
        raise InvalidKeyError("Storage key must not be empty")
    if len(key) > MAX_KEY_LENGTH:
        raise InvalidKeyError(f"Storage key exceeds {MAX_KEY_LENGTH} characters")
    if key.startswith("/") or "\\" in key:
        raise InvalidKeyError(f"Storage key must be a relative posix path: {key!r}")
    if any(part in ("", ".", "..") for part in key.split("/")):
        raise InvalidKeyError(f"Storage key contains an invalid path segment: {key!r}")
    return key


class StorageBackend(ABC):
    """Async blob store used by the document service."""

    name: str = "base"

    @abstractmethod
    async def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> str:
        """Store ``data`` under ``key`` and return a URL for it."""

    @abstractmethod
    async def get(self, key: str) -> bytes: ...

    @abstractmethod
    async def delete(self, key: str) -> bool: ...

    async def delete_many(self, keys: Iterable[str]) -> int:
        """Remove every key; absent keys are skipped. Returns the number removed."""
        removed = 0
        for key in keys:
            if await self.delete(key):
                removed += 1
        return removed

    @abstractmethod
    async def exists(self, key: str) -> bool: ...

    @abstractmethod
    async def get_url(self, key: str, expires_in: int = 3600, download: bool = False) -> str:
        """Return a time-limited retrieval URL for ``key``."""

    @abstractmethod
    async def list_keys(self, prefix: str = "", limit: Optional[int] = None) -> list[str]: ...

    @abstractmethod
    async def get_metadata(self, key: str) -> dict[str, Any]: ...


__all__ = [
    "StorageBackend",
    "StorageBackendError",
    "FileNotFoundError",
    "InvalidKeyError",
    "PermissionDeniedError",
    "QuotaExceededError",
    "validate_key",
]
