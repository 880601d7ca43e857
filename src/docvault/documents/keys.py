from __future__ import annotations

import re
import time
import uuid
from typing import Optional

KEY_PREFIX = "uploads"
_WHITESPACE = re.compile(r"\s+")
_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(filename: Optional[str]) -> str:
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1]
    name = _WHITESPACE.sub("-", name.strip())
    name = _UNSAFE.sub("", name)
    name = name.lstrip(".")
    return name or "file"


def build_storage_key(filename: Optional[str], *, now_ms: Optional[int] = None, token: Optional[str] = None) -> str:
    """``uploads/{epoch_ms}-{random}-{sanitized name}``; unique per call."""
    ts = now_ms if now_ms is not None else int(time.time() * 1000)
    token = token or uuid.uuid4().hex
    return f"{KEY_PREFIX}/{ts}-{token}-{sanitize_filename(filename)}"
