from __future__ import annotations

import asyncio
import builtins
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from ..base import FileNotFoundError, InvalidKeyError, StorageBackend, validate_key
from ..signing import URLSigner

META_SUFFIX = ".meta.json"


class LocalBackend(StorageBackend):
    """Filesystem storage rooted at ``base_path``; signed URLs are served by the app."""

    name = "local"

    def __init__(self, base_path: str, base_url: str, signing_secret: str = "dev-signing-secret"):
        self.base_path = Path(base_path)
        self.base_url = base_url.rstrip("/")
        self.signer = URLSigner(signing_secret, self.base_url)

    def _get_file_path(self, key: str) -> Path:
        validate_key(key)
        path = (self.base_path / key).resolve()
        if not path.is_relative_to(self.base_path.resolve()):
            raise InvalidKeyError(f"Storage key escapes the storage root: {key!r}")
        return path

    def _meta_path(self, key: str) -> Path:
        path = self._get_file_path(key)
        return path.with_name(path.name + META_SUFFIX)

    async def put(self, key, data, content_type, metadata=None) -> str:
        path = self._get_file_path(key)
        meta = {
            **(metadata or {}),
            "size": len(data),
            "content_type": content_type,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            self._meta_path(key).write_text(json.dumps(meta), encoding="utf-8")

        await asyncio.to_thread(_write)
        return self.signer.sign(key, 3600)

    async def get(self, key: str) -> bytes:
        path = self._get_file_path(key)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except builtins.FileNotFoundError:
            raise FileNotFoundError(f"File not found: {key}") from None

    async def delete(self, key: str) -> bool:
        path = self._get_file_path(key)

        def _remove() -> bool:
            self._meta_path(key).unlink(missing_ok=True)
            if not path.exists():
                return False
            path.unlink()
            return True

        return await asyncio.to_thread(_remove)

    async def exists(self, key: str) -> bool:
        return await asyncio.to_thread(self._get_file_path(key).is_file)

    async def get_url(self, key: str, expires_in: int = 3600, download: bool = False) -> str:
        if not await self.exists(key):
            raise FileNotFoundError(f"File not found: {key}")
        return self.signer.sign(key, expires_in, download)

    def verify_url(self, key: str, expires: str, signature: str, download: bool = False) -> bool:
        return self.signer.verify(key, expires, signature, download)

    async def list_keys(self, prefix: str = "", limit: Optional[int] = None) -> list[str]:
        def _walk() -> list[str]:
            if not self.base_path.exists():
                return []
            keys = []
            for path in self.base_path.rglob("*"):
                if not path.is_file() or path.name.endswith(META_SUFFIX):
                    continue
                key = path.relative_to(self.base_path).as_posix()
                if key.startswith(prefix):
                    keys.append(key)
            return sorted(keys)

        keys = await asyncio.to_thread(_walk)
        return keys[:limit] if limit else keys

    async def get_metadata(self, key: str) -> dict[str, Any]:
        meta_path = self._meta_path(key)
        try:
            raw = await asyncio.to_thread(meta_path.read_text, encoding="utf-8")
        except builtins.FileNotFoundError:
            raise FileNotFoundError(f"File not found: {key}") from None
        return json.loads(raw)
