"""HMAC signatures for URLs served by the app itself (memory and local backends)."""

from __future__ import annotations

import hashlib
import hmac
import time
from urllib.parse import quote, urlencode


class URLSigner:
    def __init__(self, secret: str, base_url: str):
        if not secret:
            raise ValueError("A signing secret is required to issue signed URLs")
        self._secret = secret.encode("utf-8")
        self.base_url = base_url.rstrip("/")

    def _signature(self, key: str, expires: int, download: bool) -> str:
        message = f"{key}:{expires}:{int(download)}".encode("utf-8")
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()

    def sign(self, key: str, expires_in: int, download: bool = False, *, now: float | None = None) -> str:
        expires = int((now if now is not None else time.time()) + expires_in)
        params = {"expires": expires, "signature": self._signature(key, expires, download)}
        if download:
            params["download"] = "true"
        return f"{self.base_url}/{quote(key)}?{urlencode(params)}"

    def verify(self, key: str, expires: str | int, signature: str, download: bool = False) -> bool:
        try:
            expires_at = int(expires)
        except (TypeError, ValueError):
            return False
        if expires_at < time.time():
            return False
        expected = self._signature(key, expires_at, download)
        return hmac.compare_digest(expected, signature or "")
