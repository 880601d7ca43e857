from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_SIGNING_SECRET = "dev-signing-secret-change-me"


class StorageSettings(BaseSettings):
    backend: Optional[Literal["memory", "local", "s3"]] = Field(default=None)

    # local
    base_path: str = Field(default="data/uploads")
    # where /api/files is reachable; memory/local signed URLs are built on it
    base_url: str = Field(default="http://localhost:8000/api/files")
    signing_secret: SecretStr = Field(default=SecretStr(DEV_SIGNING_SECRET))

    # s3
    s3_bucket: Optional[str] = Field(default=None)
    s3_region: str = Field(default="us-east-1")
    s3_endpoint: Optional[str] = Field(default=None)
    s3_access_key: Optional[str] = Field(default=None)
    s3_secret_key: Optional[SecretStr] = Field(default=None)

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        extra="ignore",
    )
