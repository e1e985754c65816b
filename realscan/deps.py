"""
FastAPI dependencies.

The lifecycle manager is built once per process so that its write lock
serializes every generate/revoke call. Tests swap it out with
app.dependency_overrides[get_manager].
"""

from __future__ import annotations

from functools import cache

from realscan.config import settings
from realscan.kernel.lifecycle import CodeLifecycleManager
from realscan.kernel.store import JsonFileCodeStore


@cache
def get_manager() -> CodeLifecycleManager:
    """FastAPI dependency returning the process-wide CodeLifecycleManager."""
    return CodeLifecycleManager(
        JsonFileCodeStore(settings.DATA_FILE),
        max_attempts=settings.MAX_GENERATION_ATTEMPTS,
        scanner_path=settings.SCANNER_PATH,
    )
