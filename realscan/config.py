"""
REALSCAN configuration — all environment variables in one place.

Read from environment at import time.
"""

from __future__ import annotations

import os
from pathlib import Path

_PACKAGE_DIR = Path(__file__).parent


class Settings:
    """Application settings from environment variables."""

    # Server
    HOST: str = os.environ.get("HOST", "127.0.0.1")
    PORT: int = int(os.environ.get("PORT", "3000"))

    # Storage
    DATA_FILE: Path = Path(os.environ.get("REALSCAN_DATA_FILE", "data/codes.json"))

    # Static admin/scanner pages
    PUBLIC_DIR: Path = Path(os.environ.get("REALSCAN_PUBLIC_DIR", str(_PACKAGE_DIR / "public")))

    # Codes
    SCANNER_PATH: str = os.environ.get("REALSCAN_SCANNER_PATH", "/scanner.html")
    MAX_GENERATION_ATTEMPTS: int = int(os.environ.get("REALSCAN_MAX_GENERATION_ATTEMPTS", "10000"))

    # Logging
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")

    @property
    def BASE_URL(self) -> str:
        return f"http://{self.HOST}:{self.PORT}"


# Singleton instance
settings = Settings()

if settings.MAX_GENERATION_ATTEMPTS < 1:
    raise RuntimeError("REALSCAN_MAX_GENERATION_ATTEMPTS must be at least 1")
