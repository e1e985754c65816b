"""
REALSCAN Kernel — Code Lifecycle

Generation, listing, revocation and validation of access codes.
All business rules live here; the store only moves documents.

Every operation reloads the collection from the store, so revocations and
expiries made by other callers are seen on the next call. Mutations
(generate, revoke) are serialized with a per-manager asyncio lock; reads take
no lock. Several processes sharing one store can still lose updates.

Duplicate code values: uniqueness is only enforced among active codes, so an
expired or revoked record may share its value with a newer one. revoke and
validate act on the first matching record in stored (creation) order.
"""

from __future__ import annotations

import asyncio
import logging
import math
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta
from urllib.parse import quote

from realscan.kernel.errors import (
    CodeNotFoundError,
    CodeSpaceExhaustedError,
    EmptyCodeError,
    InvalidDurationError,
    InvalidUnitError,
)
from realscan.kernel.store import CodeStore
from realscan.kernel.types import (
    CODE_LENGTH,
    CODE_SPACE,
    UNIT_SECONDS,
    Clock,
    CodeRecord,
    CodeStatus,
    CodeView,
    GeneratedCode,
    ValidationResult,
    truncate_ms,
    utc_now,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10_000
DEFAULT_SCANNER_PATH = "/scanner.html"
NOT_FOUND_REASON = "code not found"


def random_code() -> str:
    """Uniform 6-digit zero-padded code (e.g. '004271')."""
    return str(secrets.randbelow(CODE_SPACE)).zfill(CODE_LENGTH)


def parse_duration(value: object) -> float:
    """
    Coerce a duration to a positive finite float.
    Accepts ints, floats and numeric strings.

    Raises:
        InvalidDurationError: for anything else, zero, negatives, NaN or infinity
    """
    if isinstance(value, bool) or value is None:
        raise InvalidDurationError(value)
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            raise InvalidDurationError(value) from None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise InvalidDurationError(value) from None
    else:
        raise InvalidDurationError(value)

    if not math.isfinite(number) or number <= 0:
        raise InvalidDurationError(value)
    return number


class CodeLifecycleManager:
    """
    Issues, lists, revokes and validates access codes against a CodeStore.

    Usage:
        manager = CodeLifecycleManager(JsonFileCodeStore("data/codes.json"))
        issued = await manager.generate(5, "minutes", note="door A")
        result = await manager.validate(issued.code)
    """

    def __init__(
        self,
        store: CodeStore,
        clock: Clock = utc_now,
        code_factory: Callable[[], str] = random_code,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        scanner_path: str = DEFAULT_SCANNER_PATH,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._store = store
        self._clock = clock
        self._code_factory = code_factory
        self._max_attempts = max_attempts
        self._scanner_path = scanner_path
        self._write_lock = asyncio.Lock()

    # -- generate --

    async def generate(self, duration: object, unit: object, note: object = "") -> GeneratedCode:
        """
        Issue a new code valid for `duration` `unit`s from now.

        Args:
            duration: Positive number (numeric strings accepted)
            unit: "minutes" or "hours"
            note: Free text, coerced to str; None becomes ""

        Returns:
            GeneratedCode with the code, its expiry and a scanner link

        Raises:
            InvalidDurationError, InvalidUnitError: bad input, nothing saved
            CodeSpaceExhaustedError: no free code within the attempt cap
            StorageWriteError: the new record was not persisted
        """
        amount = parse_duration(duration)
        if not isinstance(unit, str) or unit not in UNIT_SECONDS:
            raise InvalidUnitError(unit)

        async with self._write_lock:
            codes = await self._store.load()
            now = self._clock()
            try:
                expires_at = truncate_ms(now + timedelta(seconds=amount * UNIT_SECONDS[unit]))
            except OverflowError:
                raise InvalidDurationError(duration) from None
            # Storage keeps milliseconds, so shorter durations would be born expired
            if expires_at <= now:
                raise InvalidDurationError(duration)
            code = self._pick_free_code(codes, now)

            record = CodeRecord(
                code=code,
                note="" if note is None else str(note),
                created_at=now,
                expires_at=expires_at,
                revoked=False,
            )
            codes.append(record)
            await self._store.save(codes)

        logger.info("Generated code %s (expires %s)", code, expires_at.isoformat())
        return GeneratedCode(code=code, expires_at=expires_at, link=self.link_for(code))

    def _pick_free_code(self, codes: list[CodeRecord], now: datetime) -> str:
        taken = {c.code for c in codes if c.is_active_at(now)}
        for attempt in range(1, self._max_attempts + 1):
            candidate = self._code_factory()
            if candidate not in taken:
                return candidate
            logger.debug("Code collision on attempt %d, retrying", attempt)
        raise CodeSpaceExhaustedError(self._max_attempts)

    def link_for(self, code: str) -> str:
        """Relative scanner URL that carries the code as a query parameter."""
        return f"{self._scanner_path}?code={quote(code)}"

    # -- list --

    async def list_codes(self) -> list[CodeView]:
        """All codes, newest first, with status and remaining time as of now."""
        codes = await self._store.load()
        now = self._clock()
        # Reverse first so that equal timestamps keep newest-inserted first
        ordered = sorted(reversed(codes), key=lambda c: c.created_at, reverse=True)
        return [
            CodeView(
                code=c.code,
                note=c.note,
                created_at=c.created_at,
                expires_at=c.expires_at,
                status=c.status_at(now),
                remaining_seconds=c.remaining_seconds_at(now),
            )
            for c in ordered
        ]

    # -- revoke --

    async def revoke(self, code: str) -> None:
        """
        Mark the first record with this code as revoked. Idempotent.

        Raises:
            CodeNotFoundError: no record has this code
            StorageWriteError: the revocation was not persisted
        """
        async with self._write_lock:
            codes = await self._store.load()
            record = _first_match(codes, code)
            if record is None:
                raise CodeNotFoundError(code)
            already = record.revoked
            record.revoked = True
            await self._store.save(codes)

        if already:
            logger.info("Code %s was already revoked", code)
        else:
            logger.info("Revoked code %s", code)

    # -- validate --

    async def validate(self, code: str | None) -> ValidationResult:
        """
        Check a presented code. Read-only.

        Raises:
            EmptyCodeError: the code is missing or blank
        """
        code = (code or "").strip()
        if not code:
            raise EmptyCodeError()

        codes = await self._store.load()
        now = self._clock()
        record = _first_match(codes, code)
        if record is None:
            return ValidationResult(ok=False, reason=NOT_FOUND_REASON)

        status = record.status_at(now)
        if status is not CodeStatus.ACTIVE:
            return ValidationResult(
                ok=False,
                reason=status.value,
                note=record.note,
                expires_at=record.expires_at,
                now=now,
            )

        return ValidationResult(
            ok=True,
            code=record.code,
            note=record.note,
            expires_at=record.expires_at,
            now=now,
        )


def _first_match(codes: list[CodeRecord], code: str) -> CodeRecord | None:
    return next((c for c in codes if c.code == code), None)
