from __future__ import annotations

from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class IdentitySettings(BaseSettings):
    # Both are required before the app will start; see ensure_configured().
    url: Optional[str] = None
    public_key: Optional[SecretStr] = None

    timeout_seconds: float = Field(default=10.0, gt=0)
    default_redirect: str = "/"

    model_config = SettingsConfigDict(env_prefix="IDENTITY_", env_file=".env", extra="ignore")

    @property
    def url_configured(self) -> bool:
        return bool(self.url and self.url.strip())

    @property
    def key_configured(self) -> bool:
        return bool(self.public_key and self.public_key.get_secret_value().strip())

    def missing(self) -> list[str]:
        names = []
        if not self.url_configured:
            names.append("IDENTITY_URL")
        if not self.key_configured:
            names.append("IDENTITY_PUBLIC_KEY")
        return names

    def ensure_configured(self) -> None:
        missing = self.missing()
        if missing:
            raise RuntimeError(f"Missing identity provider configuration: {', '.join(missing)}")


_settings: IdentitySettings | None = None


def get_identity_settings() -> IdentitySettings:
    global _settings
    if _settings is None:
        _settings = IdentitySettings()
    return _settings
