from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Optional

from ..base import FileNotFoundError, QuotaExceededError, StorageBackend, validate_key
from ..signing import URLSigner


class MemoryBackend(StorageBackend):
    """Process-local storage for tests and local development.

    Without a signer, URLs use the ``memory://`` scheme and cannot be fetched.
    With one, they point at the app's ``/api/files`` route.
    """

    name = "memory"

    def __init__(self, max_size: Optional[int] = None, signer: Optional[URLSigner] = None):
        self.max_size = max_size
        self.signer = signer
        self._objects: dict[str, bytes] = {}
        self._metadata: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    def _used(self) -> int:
        return sum(len(v) for v in self._objects.values())

    async def put(self, key, data, content_type, metadata=None) -> str:
        validate_key(key)
        async with self._lock:
            if self.max_size is not None:
                projected = self._used() - len(self._objects.get(key, b"")) + len(data)
                if projected > self.max_size:
                    raise QuotaExceededError(
                        f"Storage quota exceeded: {projected} > {self.max_size} bytes"
                    )
            self._objects[key] = bytes(data)
            self._metadata[key] = {
                **(metadata or {}),
                "size": len(data),
                "content_type": content_type,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
        return f"memory://{key}"

    async def get(self, key: str) -> bytes:
        validate_key(key)
        try:
            return self._objects[key]
        except KeyError:
            raise FileNotFoundError(f"File not found: {key}") from None

    async def delete(self, key: str) -> bool:
        validate_key(key)
        async with self._lock:
            self._metadata.pop(key, None)
            return self._objects.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        validate_key(key)
        return key in self._objects

    async def get_url(self, key: str, expires_in: int = 3600, download: bool = False) -> str:
        if not await self.exists(key):
            raise FileNotFoundError(f"File not found: {key}")
        if self.signer is not None:
            return self.signer.sign(key, expires_in, download)
        return f"memory://{key}" + ("?download=true" if download else "")

    def verify_url(self, key: str, expires: str, signature: str, download: bool = False) -> bool:
        return self.signer is not None and self.signer.verify(key, expires, signature, download)

    async def list_keys(self, prefix: str = "", limit: Optional[int] = None) -> list[str]:
        keys = sorted(k for k in self._objects if k.startswith(prefix))
        return keys[:limit] if limit else keys

    async def get_metadata(self, key: str) -> dict[str, Any]:
        validate_key(key)
        try:
            return dict(self._metadata[key])
        except KeyError:
            raise FileNotFoundError(f"File not found: {key}") from None
