from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALLOWED_TYPES: tuple[str, ...] = (
    "application/pdf",
    "text/plain",
    "text/markdown",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/png",
    "image/jpeg",
    "image/gif",
)


class DocumentSettings(BaseSettings):
    max_upload_bytes: int = Field(default=50 * 1024 * 1024, gt=0)
    # order is part of the INVALID_FILE_TYPE error details
    allowed_types: list[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_TYPES))
    preview_max_bytes: int = Field(default=512 * 1024, gt=0)
    extract_max_chars: int = Field(default=1_000_000, gt=0)
    bulk_delete_max: int = Field(default=50, gt=0)
    signed_url_ttl: int = Field(default=3600, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="DOCS_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_document_settings(**kwargs) -> DocumentSettings:
    filtered = {k: v for k, v in kwargs.items() if v is not None}
    return DocumentSettings(**filtered)
