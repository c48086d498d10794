from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    allowed_origins_raw: str = Field("", alias="ALLOWED_ORIGINS")
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(3001, alias="PORT")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    max_body_bytes: int = Field(1024 * 1024, alias="MAX_BODY_BYTES")
    max_members: int = Field(100_000, alias="MAX_MEMBERS")

    @property
    def allowed_origins(self) -> list[str]:
        origins = [o.strip() for o in self.allowed_origins_raw.split(",") if o.strip()]
        return origins or ["*"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
