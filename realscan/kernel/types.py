"""
REALSCAN Kernel — Shared Types

Data classes used across the store and the lifecycle manager.
Timestamps are timezone-aware UTC datetimes truncated to milliseconds,
serialized as ISO 8601 with a trailing "Z" (e.g. 2026-01-01T10:00:00.000Z).
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

CODE_LENGTH = 6
CODE_SPACE = 10**CODE_LENGTH

# Seconds per accepted duration unit
UNIT_SECONDS: dict[str, int] = {
    "minutes": 60,
    "hours": 3600,
}

Clock = Callable[[], datetime]


# ---------------------------------------------------------------------------
# Time helpers
# ---------------------------------------------------------------------------


def truncate_ms(value: datetime) -> datetime:
    """Drop sub-millisecond precision so stored and in-memory values agree."""
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def utc_now() -> datetime:
    """Current UTC time at millisecond precision. Default clock."""
    return truncate_ms(datetime.now(UTC))


def to_iso(value: datetime) -> str:
    """Serialize a datetime as ISO 8601 UTC with milliseconds and a Z suffix."""
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def from_iso(value: str) -> datetime:
    """Parse an ISO 8601 timestamp. Naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return truncate_ms(parsed.astimezone(UTC))


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


class CodeStatus(StrEnum):
    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"


@dataclass
class CodeRecord:
    """
    One issued access code. Created by generation, mutated only by revocation,
    never deleted. Status is derived at read time and never stored.
    """

    code: str
    created_at: datetime
    expires_at: datetime
    note: str = ""
    revoked: bool = False

    def status_at(self, now: datetime) -> CodeStatus:
        if self.revoked:
            return CodeStatus.REVOKED
        if now >= self.expires_at:
            return CodeStatus.EXPIRED
        return CodeStatus.ACTIVE

    def is_active_at(self, now: datetime) -> bool:
        return self.status_at(now) is CodeStatus.ACTIVE

    def remaining_seconds_at(self, now: datetime) -> int:
        return max(0, math.floor((self.expires_at - now).total_seconds()))

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "note": self.note,
            "createdAt": to_iso(self.created_at),
            "expiresAt": to_iso(self.expires_at),
            "revoked": self.revoked,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> CodeRecord:
        return cls(
            code=str(d["code"]),
            note=str(d.get("note") or ""),
            created_at=from_iso(d["createdAt"]),
            expires_at=from_iso(d["expiresAt"]),
            revoked=bool(d.get("revoked", False)),
        )


@dataclass
class CodeView:
    """A record plus its status and remaining time at the moment of listing."""

    code: str
    note: str
    created_at: datetime
    expires_at: datetime
    status: CodeStatus
    remaining_seconds: int


@dataclass
class GeneratedCode:
    """Result of a successful generate call."""

    code: str
    expires_at: datetime
    link: str


@dataclass
class ValidationResult:
    """
    Outcome of presenting a code. ok=False is a normal business answer,
    not an error: `reason` says why ("code not found", "expired", "revoked").
    """

    ok: bool
    reason: str | None = None
    code: str | None = None
    note: str | None = None
    expires_at: datetime | None = None
    now: datetime | None = None
