"""
REALSCAN Kernel — Code Store

Durable load/save of the whole code collection as one JSON document:

    {"codes": [{"code": ..., "note": ..., "createdAt": ..., "expiresAt": ..., "revoked": ...}]}

No locking or versioning here. The caller sequences load → mutate → save.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from realscan.kernel.errors import StorageReadError, StorageWriteError
from realscan.kernel.types import CodeRecord

logger = logging.getLogger(__name__)


def empty_document() -> dict[str, Any]:
    return {"codes": []}


def dump_document(codes: list[CodeRecord]) -> str:
    return json.dumps({"codes": [c.to_dict() for c in codes]}, indent=2)


def parse_document(raw: str) -> list[CodeRecord]:
    """
    Parse a persisted document into records.

    Raises:
        StorageReadError: if the text is not JSON or the records are malformed
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StorageReadError(f"Invalid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise StorageReadError("Top-level value is not an object")

    entries = data.get("codes") or []
    if not isinstance(entries, list):
        raise StorageReadError("'codes' is not a list")

    try:
        return [CodeRecord.from_dict(e) for e in entries]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise StorageReadError(f"Malformed code record: {exc}") from exc


# ---------------------------------------------------------------------------
# Storage protocol
# ---------------------------------------------------------------------------


class CodeStore:
    """
    Abstract storage interface.
    Implement with a JSON file for production, or in-memory for tests.
    """

    async def load(self) -> list[CodeRecord]:
        """Return the persisted collection. Never raises; unreadable state is empty."""
        raise NotImplementedError

    async def save(self, codes: list[CodeRecord]) -> None:
        """Overwrite the persisted collection. Raises StorageWriteError on failure."""
        raise NotImplementedError


class MemoryCodeStore(CodeStore):
    """In-memory storage for testing. Keeps the serialized document, not live objects."""

    def __init__(self, raw: str | None = None) -> None:
        self.raw: str = raw if raw is not None else json.dumps(empty_document())

    async def load(self) -> list[CodeRecord]:
        try:
            return parse_document(self.raw)
        except StorageReadError as exc:
            logger.warning("Discarding unreadable in-memory code store: %s", exc)
            return []

    async def save(self, codes: list[CodeRecord]) -> None:
        self.raw = dump_document(codes)


class JsonFileCodeStore(CodeStore):
    """
    JSON file storage.

    The file (and its directory) is created holding an empty collection on
    construction if it does not exist yet. Saves go to a temp file in the same
    directory which is then renamed over the target.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._ensure_initialized()

    def _ensure_initialized(self) -> None:
        if self.path.exists():
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(empty_document(), indent=2), encoding="utf-8")
        logger.info("Initialized empty code store at %s", self.path)

    async def load(self) -> list[CodeRecord]:
        return await asyncio.to_thread(self._load_sync)

    async def save(self, codes: list[CodeRecord]) -> None:
        await asyncio.to_thread(self._write_sync, dump_document(codes))

    def _load_sync(self) -> list[CodeRecord]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read code store %s: %s", self.path, exc)
            return []

        try:
            return parse_document(raw)
        except StorageReadError as exc:
            logger.warning("Treating corrupt code store %s as empty: %s", self.path, exc)
            return []

    def _write_sync(self, text: str) -> None:
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            logger.exception("Failed to write code store %s", self.path)
            raise StorageWriteError(f"Could not write {self.path}: {exc}") from exc
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
