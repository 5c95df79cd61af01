"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DB_PATH = Path(__file__).resolve().parent / "inflation_queries.db"


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Settings:
    """Centralized application settings."""

    def __init__(self) -> None:
        # Server
        self.APP_HOST: str = os.getenv("APP_HOST", "127.0.0.1")
        self.APP_PORT: int = int(os.getenv("APP_PORT", "3000"))

        # Database
        self.DATABASE_PATH: Path = Path(os.getenv("DATABASE_PATH", str(DEFAULT_DB_PATH)))

        # HTTP
        self.CORS_ORIGINS: List[str] = _split_origins(
            os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
        )
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

        # History
        self.HISTORY_DEFAULT_LIMIT: int = int(os.getenv("HISTORY_DEFAULT_LIMIT", "50"))
        self.HISTORY_MAX_LIMIT: int = int(os.getenv("HISTORY_MAX_LIMIT", "500"))
        self.HISTORY_RETENTION_DAYS: int = int(os.getenv("HISTORY_RETENTION_DAYS", "90"))


settings = Settings()
