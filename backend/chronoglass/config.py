from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Annotated, List

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

APP_DIR_NAME = "ChronoGlass"


def user_data_dir() -> Path:
    """Return the per-user application data directory for this platform."""
    if sys.platform.startswith("win"):
        base = os.environ.get("APPDATA") or Path.home() / "AppData" / "Roaming"
        return Path(base) / APP_DIR_NAME
    base = os.environ.get("XDG_DATA_HOME") or (Path.home() / ".local" / "share")
    return Path(base) / APP_DIR_NAME


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="CG_", case_sensitive=False, extra="ignore")
    """Application runtime configuration."""

    app_name: str = "ChronoGlass"
    host: str = "127.0.0.1"
    port: int = 45321
    allow_remote: bool = False
    allowed_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: [
            "http://127.0.0.1:5173",
            "http://localhost:5173",
            "tauri://localhost",
        ]
    )

    data_dir: Path = Field(default_factory=user_data_dir)
    data_file: str = "data.json"

    default_weekly_hours_target: int = 40
    default_user_name: str = "User"

    log_level: str = "INFO"

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: str | List[str]) -> List[str]:
        if isinstance(value, list):
            return value
        if not value:
            return []
        return [origin.strip() for origin in value.split(",") if origin.strip()]

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    @computed_field
    def data_path(self) -> Path:
        return self.data_dir / self.data_file


settings = Settings()
