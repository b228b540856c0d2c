"""Runtime settings, read from ``QUIZDESK_*`` environment variables or ``.env``."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from quizdesk.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quizdesk.constants.store_constants import (
    DEFAULT_JSON_STORE_PATH,
    DEFAULT_XLSX_STORE_PATH,
    STORE_BACKEND_JSON,
    STORE_BACKEND_XLSX,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="QUIZDESK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    store_backend: Literal["memory", "json", "xlsx"] = "memory"
    store_path: Path | None = None
    # Shared secret for the admin surface; not a security boundary.
    admin_key: str = "admin123"
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    def resolved_store_path(self) -> Path | None:
        if self.store_path is not None:
            return self.store_path
        if self.store_backend == STORE_BACKEND_JSON:
            return Path(DEFAULT_JSON_STORE_PATH)
        if self.store_backend == STORE_BACKEND_XLSX:
            return Path(DEFAULT_XLSX_STORE_PATH)
        return None


def load_settings() -> Settings:
    return Settings()
