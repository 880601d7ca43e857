from __future__ import annotations

from typing import Optional, Sequence

from docvault.exceptions import FileTooLargeError, InvalidFileTypeError, ValidationError


def validate_upload(
    data: Optional[bytes],
    content_type: Optional[str],
    title: Optional[str],
    *,
    max_bytes: int,
    allowed_types: Sequence[str],
) -> str:
    """Check an upload and return its trimmed title.

    Checks run in a fixed order and the first failure is raised. Only the
    declared MIME type is consulted; the bytes are never sniffed.
    """
    if data is None:
        raise ValidationError("File is required")

    clean_title = (title or "").strip()
    if not clean_title:
        raise ValidationError("Title is required")

    size = len(data)
    if size > max_bytes:
        raise FileTooLargeError(
            f"File is too large. Maximum size is {_human_size(max_bytes)}.",
            details={"maxBytes": max_bytes, "actualBytes": size},
        )

    if content_type not in allowed_types:
        raise InvalidFileTypeError(
            "File type is not allowed.",
            details={"allowedTypes": list(allowed_types), "providedType": content_type},
        )

    return clean_title


def _human_size(n: int) -> str:
    if n >= 1024 * 1024 and n % (1024 * 1024) == 0:
        return f"{n // (1024 * 1024)} MB"
    if n >= 1024 and n % 1024 == 0:
        return f"{n // 1024} KB"
    return f"{n} bytes"
