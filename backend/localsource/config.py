"""localsource configuration — Pydantic BaseSettings loaded from .env."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from localsource.utils.file_attrs import META_FILE_EXT


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "localsource"
    debug: bool = False
    log_level: str = "INFO"

    # Network
    host: str = "127.0.0.1"
    port: int = 8000
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Content root — items are served relative to this directory
    root_dir: str = "./data"
    meta_file_ext: str = META_FILE_EXT

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        env_prefix="LOCALSOURCE_",
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: list[str] | str) -> list[str]:
        if isinstance(value, str) and not value.startswith("["):
            return [o.strip() for o in value.split(",") if o.strip()]
        return value

    @field_validator("meta_file_ext")
    @classmethod
    def check_meta_file_ext(cls, value: str) -> str:
        if not value.startswith("."):
            raise ValueError("meta_file_ext must start with '.'")
        return value

    @model_validator(mode="after")
    def _resolve_root(self) -> "Settings":
        """Ensure the content root is absolute (relative to the working dir)."""
        self.root_dir = os.path.abspath(os.path.expanduser(self.root_dir))
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
