# src/paginated_select_engine/pagination.py
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Collection, Coroutine, Dict, Optional

from .adapter import DataAdapter, call_adapter, to_option
from .exceptions import FetchFailedError, MalformedResponseError, PaginatedSelectError
from .models import ListRequest, ListResponse, derive_has_more
from .monitoring import observe_list_fetch
from .session import GenerationFence
from .store import ResultStore

logger = logging.getLogger(__name__)

Spawn = Callable[[Coroutine[Any, Any, None]], asyncio.Task]


@dataclass
class PaginationState:
    """Paging state of one select instance. Mutated only by its PaginationController."""
    page: int = 1
    has_more: bool = True
    fetching: bool = False
    generation: int = 0


class PaginationController:
    """
    Drives page loading for one select instance.

    Page 1 is (re)loaded on every session change; further pages are requested
    by scroll-exhaustion signals. At most one `list` call is outstanding at any
    time: a reset cancels the in-flight fetch before page 1 is issued, and
    `request_next_page` is a no-op while a fetch is running or after the last
    page. Completions carry the generation they were issued under and are
    dropped once a newer session exists.
    """

    def __init__(
        self,
        adapter: DataAdapter,
        store: ResultStore,
        fence: GenerationFence,
        *,
        page_size: int,
        selected_values: Callable[[], Collection[str]],
        timeout: Optional[float] = None,
        spawn: Optional[Spawn] = None,
        log: Optional[logging.LoggerAdapter] = None,
        on_error: Optional[Callable[[PaginatedSelectError], None]] = None,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self._adapter = adapter
        self._store = store
        self._fence = fence
        self.page_size = page_size
        self._selected_values = selected_values
        self._timeout = timeout
        self._spawn = spawn or (lambda coro: asyncio.get_running_loop().create_task(coro))
        self._log = log or logger
        self._on_error = on_error
        self._on_change = on_change

        self.state = PaginationState()
        self._search: Optional[str] = None
        self._params: Optional[Dict[str, Any]] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    def reset(self, search: Optional[str], params: Optional[Dict[str, Any]], generation: int) -> None:
        """Starts a new session: cancels any in-flight fetch and rewinds to page 1."""
        self.cancel()
        self.state = PaginationState(generation=generation)
        self._search = search or None
        self._params = params
        self._log.debug("Pagination reset.", extra={"generation": generation, "search": self._search})

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self.state.fetching = False

    def load_first_page(self) -> Optional[asyncio.Task]:
        if self.state.fetching:
            self._log.debug("load_first_page skipped: fetch in flight.")
            return None
        self.state.page = 1
        return self._issue(1)

    def request_next_page(self) -> Optional[asyncio.Task]:
        if self.state.fetching:
            self._log.debug("request_next_page skipped: fetching.", extra={"page": self.state.page})
            return None
        if not self.state.has_more:
            self._log.debug("request_next_page skipped: no more pages.", extra={"page": self.state.page})
            return None
        self.state.page += 1
        return self._issue(self.state.page)

    def _issue(self, page: int) -> asyncio.Task:
        self.state.fetching = True
        self._task = self._spawn(self._fetch(page, self.state.generation))
        self._changed()
        return self._task

    async def _fetch(self, page: int, generation: int) -> None:
        self._log.debug("Fetching page.", extra={"page": page, "generation": generation})
        try:
            try:
                request = ListRequest(page=page, page_size=self.page_size, search=self._search, params=self._params)
                raw = await call_adapter("list", self._adapter.list, request, timeout=self._timeout)
                response = ListResponse.from_raw(raw)
                fresh = [to_option(self._adapter, item) for item in response.items]
            except Exception as e:
                if not self._fence.check(generation, "list"):
                    return
                observe_list_fetch("failure")
                self.state.has_more = False
                self.state.fetching = False
                self._log.warning("Page fetch failed; paging stopped.", extra={"page": page, "error": repr(e)})
                self._report(FetchFailedError(page, e))
                self._changed()
                return

            if not self._fence.check(generation, "list"):
                return

            if page == 1:
                self._store.merge_first_page(fresh, set(self._selected_values()))
            else:
                self._store.append_page(fresh)

            if response.signal is None:
                observe_list_fetch("malformed")
                self._report(MalformedResponseError(page))
            else:
                observe_list_fetch("success")

            self.state.has_more = derive_has_more(response.signal, page, self.page_size)
            self.state.fetching = False
            self._log.debug(
                "Page merged.",
                extra={"page": page, "fetched": len(fresh), "total": len(self._store), "has_more": self.state.has_more},
            )
            self._changed()
        finally:
            if self._task is asyncio.current_task():
                self._task = None

    def _report(self, error: PaginatedSelectError) -> None:
        if self._on_error is not None:
            self._on_error(error)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()
