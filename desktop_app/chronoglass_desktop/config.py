"""Konfigurations-Utilities für die Begleitwerkzeuge."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_API_BASE_URL = "http://127.0.0.1:45321"
DEFAULT_TIMEOUT = 15


@dataclass(slots=True)
class AppConfig:
    """Konfigurationswerte für den API-Client."""

    api_base_url: str = DEFAULT_API_BASE_URL
    timeout_seconds: int = DEFAULT_TIMEOUT


def load_config() -> AppConfig:
    """Lädt die Konfiguration aus einer optionalen `.env` Datei."""

    env_path = Path(__file__).resolve().parent.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return AppConfig(
        api_base_url=os.getenv("CHRONOGLASS_API_BASE_URL", DEFAULT_API_BASE_URL),
        timeout_seconds=int(os.getenv("CHRONOGLASS_TIMEOUT", DEFAULT_TIMEOUT)),
    )


__all__ = ["AppConfig", "load_config"]
