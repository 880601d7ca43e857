from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Optional

from pypdf import PdfReader

logger = logging.getLogger(__name__)

MAX_EXTRACT_CHARS = 1_000_000
PREVIEW_MAX_BYTES = 512 * 1024
TEXT_TYPES = frozenset({"text/plain", "text/markdown"})
PDF_TYPE = "application/pdf"


@dataclass(frozen=True)
class Extraction:
    text: str
    truncated: bool


def _pdf_text(data: bytes) -> Optional[str]:
    try:
        reader = PdfReader(io.BytesIO(data))
        parts = []
        for page in reader.pages:
            t = page.extract_text() or ""
            if t:
                parts.append(t)
    except Exception as exc:
        logger.warning("PDF text extraction failed: %s", exc, exc_info=True)
        return None
    return "\n\n".join(parts)


def extract_text(data: bytes, mime_type: Optional[str], *, max_chars: int = MAX_EXTRACT_CHARS) -> Optional[Extraction]:
    """Pull plain text out of a stored file.

    Returns None when the type is unsupported, parsing fails or the result is
    blank. Never raises for bad input.
    """
    if mime_type in TEXT_TYPES:
        text = data.decode("utf-8", errors="replace")
    elif mime_type == PDF_TYPE:
        text = _pdf_text(data)
        if text is None:
            return None
    else:
        return None

    text = text.replace("\x00", "")
    if not text.strip():
        return None
    if len(text) > max_chars:
        return Extraction(text=text[:max_chars], truncated=True)
    return Extraction(text=text, truncated=False)


def _utf8_boundary(data: bytes, cut: int) -> int:
    # step back over continuation bytes (10xxxxxx), at most 3 of them
    end = cut
    for _ in range(3):
        if end <= 0 or end >= len(data) or (data[end] & 0xC0) != 0x80:
            break
        end -= 1
    return end


def preview_text(data: bytes, *, max_bytes: int = PREVIEW_MAX_BYTES) -> Extraction:
    """Decode at most ``max_bytes`` leading bytes without splitting a character."""
    if len(data) <= max_bytes:
        return Extraction(text=data.decode("utf-8", errors="replace"), truncated=False)
    end = _utf8_boundary(data, max_bytes)
    return Extraction(text=data[:end].decode("utf-8", errors="replace"), truncated=True)
