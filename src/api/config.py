"""Configuration management."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv


@dataclass
class Settings:
    """API settings, read from the environment by :func:`get_settings`."""

    db_path: Path = Path("data/pontos.db")
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


def _parse_origins(raw: str) -> List[str]:
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


def get_settings(env_file: Path | str = Path(".env")) -> Settings:
    """Build settings from environment variables, falling back to defaults.

    Values in ``env_file`` (relative to the working directory) are loaded
    first; variables already present in the environment take precedence.
    """

    load_dotenv(env_file)

    settings = Settings()

    db_path = os.getenv("DONATION_DB_PATH")
    if db_path:
        settings.db_path = Path(db_path)

    settings.host = os.getenv("HOST", settings.host)

    port = os.getenv("PORT")
    if port:
        try:
            settings.port = int(port)
        except ValueError as exc:
            raise ValueError(f"PORT must be an integer, got {port!r}.") from exc

    origins = os.getenv("CORS_ORIGINS")
    if origins is not None:
        settings.cors_origins = _parse_origins(origins)

    settings.log_level = os.getenv("LOG_LEVEL", settings.log_level).upper()
    return settings
