# src/paginated_select_engine/debounce.py
import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

from .config import PAGINATED_SELECT_DEBOUNCE_MS

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = PAGINATED_SELECT_DEBOUNCE_MS / 1000


class SearchDebouncer:
    """
    Turns raw search input into settled search terms.

    Each `feed` cancels the pending emission and schedules a new one after a
    quiet window; only the last term of an uninterrupted burst is emitted, on
    the trailing edge. The callback may be sync or async.
    """

    def __init__(self, on_settled: Callable[[str], Any], delay: float = DEFAULT_DEBOUNCE_SECONDS):
        if delay < 0:
            raise ValueError("Debounce delay cannot be negative.")
        self._on_settled = on_settled
        self.delay = delay
        self._task: Optional[asyncio.Task] = None

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def feed(self, term: str) -> None:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._settle(term))

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _settle(self, term: str) -> None:
        await asyncio.sleep(self.delay)
        # From here on the emission is committed; a later feed() schedules a new one.
        self._task = None
        result = self._on_settled(term)
        if inspect.isawaitable(result):
            await result
