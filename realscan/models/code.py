"""Access code API models. Field names follow the camelCase wire format."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, Field, PlainSerializer

from realscan.kernel.types import CodeView, GeneratedCode, ValidationResult, to_iso

# Serialized as 2026-01-01T10:00:00.000Z
Timestamp = Annotated[datetime, PlainSerializer(to_iso, return_type=str, when_used="json")]


class CreateCodeRequest(BaseModel):
    """
    What the admin page sends to POST /api/codes.

    Loosely typed: duration and unit are checked by the lifecycle manager so
    bad values come back as 400 {ok: false, error}.
    """

    duration: Any = None
    unit: Any = None
    note: Any = ""


class CreateCodeResponse(BaseModel):
    ok: bool = True
    code: str
    expiresAt: Timestamp
    link: str

    @classmethod
    def from_generated(cls, generated: GeneratedCode) -> CreateCodeResponse:
        return cls(code=generated.code, expiresAt=generated.expires_at, link=generated.link)


class CodeListItem(BaseModel):
    code: str
    note: str
    createdAt: Timestamp
    expiresAt: Timestamp
    status: str
    remainingSec: int

    @classmethod
    def from_view(cls, view: CodeView) -> CodeListItem:
        return cls(
            code=view.code,
            note=view.note,
            createdAt=view.created_at,
            expiresAt=view.expires_at,
            status=view.status.value,
            remainingSec=view.remaining_seconds,
        )


class CodeListResponse(BaseModel):
    codes: list[CodeListItem] = Field(default_factory=list)


class OkResponse(BaseModel):
    ok: bool = True


class ValidateResponse(BaseModel):
    """Validation answer. Unset fields are dropped from the response body."""

    ok: bool
    reason: str | None = None
    code: str | None = None
    note: str | None = None
    expiresAt: Timestamp | None = None
    now: Timestamp | None = None

    @classmethod
    def from_result(cls, result: ValidationResult) -> ValidateResponse:
        return cls(
            ok=result.ok,
            reason=result.reason,
            code=result.code,
            note=result.note,
            expiresAt=result.expires_at,
            now=result.now,
        )


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str
