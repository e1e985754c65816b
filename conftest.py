"""
Pytest configuration and shared fixtures for REALSCAN tests.

Kernel and route tests run against MemoryCodeStore and a hand-driven clock,
so expiry boundaries are deterministic.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from realscan.kernel.lifecycle import CodeLifecycleManager
from realscan.kernel.store import MemoryCodeStore

START = datetime(2026, 1, 1, 10, 0, 0, tzinfo=UTC)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryCodeStore()


@pytest.fixture
def manager(store, clock):
    return CodeLifecycleManager(store, clock=clock)
