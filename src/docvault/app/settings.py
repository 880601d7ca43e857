from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_SESSION_SECRET = "dev-session-secret-change-me"


class AppSettings(BaseSettings):
    # flat = easy env overrides
    name: str = "docvault"
    version: str = "0.1.0"

    cors_origins: str = "http://localhost:3000"
    # Signs the session cookie that carries the identity provider tokens.
    session_secret: SecretStr = Field(default=SecretStr(DEV_SESSION_SECRET))
    session_cookie: str = "docvault-session"
    session_max_age: int = 60 * 60 * 24 * 7
    # The session cookie is https-only when this is an https:// URL.
    public_base_url: str = "http://localhost:8000"

    model_config = SettingsConfigDict(
        env_prefix="APP_",            # APP_NAME, APP_SESSION_SECRET, ...
        env_file=".env",
        extra="ignore",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_app_settings(**kwargs) -> AppSettings:
    # Only include kwargs that are not None, so defaults in AppSettings are used
    filtered_kwargs = {k: v for k, v in kwargs.items() if v is not None}
    return AppSettings(**filtered_kwargs)
