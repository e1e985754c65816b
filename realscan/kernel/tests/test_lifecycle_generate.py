"""
REALSCAN Lifecycle — generate() Tests

Input checks, expiry arithmetic, collision avoidance among active codes,
and the bounded retry.
"""

import re
from datetime import timedelta
from itertools import chain, repeat

import pytest

from realscan.kernel.errors import (
    CodeSpaceExhaustedError,
    InvalidDurationError,
    InvalidUnitError,
    StorageWriteError,
    ValidationError,
)
from realscan.kernel.lifecycle import CodeLifecycleManager, random_code
from realscan.kernel.store import MemoryCodeStore
from realscan.kernel.types import CodeRecord

CODE_RE = re.compile(r"^[0-9]{6}$")


def scripted(*codes: str):
    """Code factory that hands out the given codes in order, then repeats the last."""
    it = chain(codes, repeat(codes[-1]))
    return lambda: next(it)


# ============================================================================
# Happy path
# ============================================================================


class TestGenerate:
    async def test_five_minutes(self, manager, clock):
        issued = await manager.generate(5, "minutes")

        assert CODE_RE.match(issued.code)
        assert issued.expires_at == clock.now + timedelta(seconds=300)

    async def test_one_hour(self, manager, clock):
        issued = await manager.generate(1, "hours")
        assert issued.expires_at == clock.now + timedelta(hours=1)

    async def test_fractional_duration(self, manager, clock):
        issued = await manager.generate(1.5, "minutes")
        assert issued.expires_at == clock.now + timedelta(seconds=90)

    async def test_numeric_string_duration(self, manager, clock):
        issued = await manager.generate("10", "minutes")
        assert issued.expires_at == clock.now + timedelta(minutes=10)

    async def test_record_is_persisted(self, manager, store, clock):
        issued = await manager.generate(5, "minutes", note="Hall B")

        [record] = await store.load()
        assert record.code == issued.code
        assert record.note == "Hall B"
        assert record.created_at == clock.now
        assert record.expires_at == issued.expires_at
        assert record.revoked is False
        assert record.expires_at > record.created_at

    async def test_note_defaults_to_empty(self, manager, store):
        await manager.generate(5, "minutes")
        [record] = await store.load()
        assert record.note == ""

    async def test_none_note_becomes_empty(self, manager, store):
        await manager.generate(5, "minutes", note=None)
        [record] = await store.load()
        assert record.note == ""

    async def test_non_text_note_is_coerced(self, manager, store):
        await manager.generate(5, "minutes", note=42)
        [record] = await store.load()
        assert record.note == "42"

    async def test_link_embeds_code(self, manager):
        issued = await manager.generate(5, "minutes")
        assert issued.link == f"/scanner.html?code={issued.code}"

    async def test_custom_scanner_path(self, store, clock):
        manager = CodeLifecycleManager(store, clock=clock, scanner_path="/scan")
        issued = await manager.generate(5, "minutes")
        assert issued.link == f"/scan?code={issued.code}"

    async def test_records_append_in_creation_order(self, manager, store, clock):
        first = await manager.generate(5, "minutes")
        clock.advance(seconds=1)
        second = await manager.generate(5, "minutes")

        assert [r.code for r in await store.load()] == [first.code, second.code]


# ============================================================================
# Input validation
# ============================================================================


class TestGenerateRejections:
    @pytest.mark.parametrize(
        "duration",
        [0, -1, -0.5, "", "abc", None, True, float("nan"), float("inf"), [5], {"n": 5}],
    )
    async def test_invalid_duration(self, manager, store, duration):
        with pytest.raises(InvalidDurationError):
            await manager.generate(duration, "minutes")
        assert await store.load() == []

    @pytest.mark.parametrize("unit", ["days", "Minutes", "minute", "", None, 60])
    async def test_invalid_unit(self, manager, store, unit):
        with pytest.raises(InvalidUnitError):
            await manager.generate(5, unit)
        assert await store.load() == []

    async def test_errors_are_validation_errors(self, manager):
        with pytest.raises(ValidationError):
            await manager.generate(-1, "minutes")
        with pytest.raises(ValidationError):
            await manager.generate(1, "weeks")

    async def test_duration_checked_before_unit(self, manager):
        with pytest.raises(InvalidDurationError):
            await manager.generate(-1, "weeks")

    async def test_duration_too_large_for_calendar(self, manager, store):
        with pytest.raises(InvalidDurationError):
            await manager.generate(1e12, "hours")
        assert await store.load() == []

    async def test_integer_too_large_for_float(self, manager, store):
        with pytest.raises(InvalidDurationError):
            await manager.generate(10**400, "minutes")
        assert await store.load() == []

    async def test_sub_millisecond_duration_rejected(self, manager, store):
        with pytest.raises(InvalidDurationError):
            await manager.generate(1e-6, "minutes")
        assert await store.load() == []

    async def test_expiry_is_stored_at_millisecond_precision(self, manager, store, clock):
        # 0.000025 minutes is 1.5 ms, stored as 1 ms
        issued = await manager.generate(0.000025, "minutes")

        [record] = await store.load()
        assert issued.expires_at == clock.now + timedelta(milliseconds=1)
        assert record.expires_at == issued.expires_at
        assert record.expires_at > record.created_at
        assert (await manager.validate(issued.code)).ok is True


# ============================================================================
# Collisions
# ============================================================================


class TestCollisions:
    async def test_skips_code_held_by_active_record(self, store, clock):
        manager = CodeLifecycleManager(store, clock=clock, code_factory=scripted("111111", "111111", "222222"))

        first = await manager.generate(5, "minutes")
        second = await manager.generate(5, "minutes")

        assert first.code == "111111"
        assert second.code == "222222"

    async def test_reuses_code_of_expired_record(self, store, clock):
        manager = CodeLifecycleManager(store, clock=clock, code_factory=scripted("111111"))
        await manager.generate(1, "minutes")
        clock.advance(minutes=1)

        again = await manager.generate(1, "minutes")

        assert again.code == "111111"
        assert [r.code for r in await store.load()] == ["111111", "111111"]

    async def test_reuses_code_of_revoked_record(self, store, clock):
        manager = CodeLifecycleManager(store, clock=clock, code_factory=scripted("111111"))
        await manager.generate(5, "minutes")
        await manager.revoke("111111")

        again = await manager.generate(5, "minutes")

        assert again.code == "111111"

    async def test_exhaustion_raises_and_saves_nothing(self, store, clock):
        manager = CodeLifecycleManager(store, clock=clock, code_factory=scripted("111111"), max_attempts=5)
        await manager.generate(5, "minutes")

        with pytest.raises(CodeSpaceExhaustedError) as exc_info:
            await manager.generate(5, "minutes")

        assert exc_info.value.attempts == 5
        assert len(await store.load()) == 1

    async def test_attempt_cap_must_be_positive(self, store):
        with pytest.raises(ValueError):
            CodeLifecycleManager(store, max_attempts=0)

    async def test_many_codes_in_one_window_are_distinct(self, manager, store):
        issued = [await manager.generate(1, "hours") for _ in range(300)]

        codes = [i.code for i in issued]
        assert len(set(codes)) == len(codes)
        assert all(CODE_RE.match(c) for c in codes)


# ============================================================================
# Storage
# ============================================================================


class FailingStore(MemoryCodeStore):
    async def save(self, codes: list[CodeRecord]) -> None:
        raise StorageWriteError("disk full")


async def test_write_failure_propagates(clock):
    manager = CodeLifecycleManager(FailingStore(), clock=clock)
    with pytest.raises(StorageWriteError):
        await manager.generate(5, "minutes")


def test_random_code_shape():
    for _ in range(200):
        assert CODE_RE.match(random_code())
