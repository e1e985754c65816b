"""
Route test fixtures.

The app's lifecycle manager is swapped for one backed by MemoryCodeStore and
the shared FakeClock, so no test touches data/codes.json.
"""

from __future__ import annotations

import httpx
import pytest_asyncio

from realscan.deps import get_manager
from realscan.main import app


@pytest_asyncio.fixture
async def async_client(manager):
    """Async HTTP client against the ASGI app."""
    app.dependency_overrides[get_manager] = lambda: manager
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()
