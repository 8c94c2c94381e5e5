# tests/unit/conftest.py
import asyncio
from typing import Any, Dict, List

import pytest

from paginated_select_engine.settings import SelectSettings


def _user(i: int) -> Dict[str, Any]:
    return {"id": f"u{i}", "name": f"User {i}", "role": "admin" if i % 2 else "guest"}


@pytest.fixture
def users() -> List[Dict[str, Any]]:
    """25 users u1..u25; odd ids are admins."""
    return [_user(i) for i in range(1, 26)]


@pytest.fixture
def fast_settings() -> SelectSettings:
    """Settings with a short debounce window and no adapter timeouts."""
    return SelectSettings(
        page_size=10,
        debounce_seconds=0.02,
        fetch_timeout_seconds=None,
        lookup_timeout_seconds=None,
        debug=True,
    )


class Gate:
    """Lets a test hold an async adapter call open until it is released."""

    def __init__(self):
        self._event = asyncio.Event()
        self.entered = 0

    async def wait(self):
        self.entered += 1
        await self._event.wait()

    def release(self):
        self._event.set()


@pytest.fixture
def gate_factory():
    return Gate
