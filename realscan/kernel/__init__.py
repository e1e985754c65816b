"""
REALSCAN Kernel — the access code core.

Two components:
  store      — durable load/save of the whole code collection
  lifecycle  — generate, list, revoke, validate (all business rules)
"""

from realscan.kernel.errors import (
    CodeError,
    CodeNotFoundError,
    CodeSpaceExhaustedError,
    EmptyCodeError,
    InvalidDurationError,
    InvalidUnitError,
    NotFoundError,
    StorageReadError,
    StorageWriteError,
    ValidationError,
)
from realscan.kernel.lifecycle import CodeLifecycleManager, random_code
from realscan.kernel.store import CodeStore, JsonFileCodeStore, MemoryCodeStore
from realscan.kernel.types import (
    CodeRecord,
    CodeStatus,
    CodeView,
    GeneratedCode,
    ValidationResult,
    utc_now,
)

__all__ = [
    "CodeLifecycleManager",
    "random_code",
    "CodeStore",
    "JsonFileCodeStore",
    "MemoryCodeStore",
    "CodeRecord",
    "CodeStatus",
    "CodeView",
    "GeneratedCode",
    "ValidationResult",
    "utc_now",
    "CodeError",
    "ValidationError",
    "InvalidDurationError",
    "InvalidUnitError",
    "EmptyCodeError",
    "NotFoundError",
    "CodeNotFoundError",
    "StorageReadError",
    "StorageWriteError",
    "CodeSpaceExhaustedError",
]
