# src/paginated_select_engine/paginated_select.py
import asyncio
import contextvars
import logging
from typing import Any, Callable, Coroutine, Dict, List, Optional, Tuple, Union

from .adapter import DataAdapter, supports_bulk_lookup, supports_point_lookup
from .debounce import SearchDebouncer
from .exceptions import InvalidConfigurationError, PaginatedSelectError
from .guard import effective_value, normalize_selection
from .logging_utils import DiagnosticLogger, generate_instance_id, select_instance_var
from .models import Option, SelectSnapshot
from .pagination import PaginationController
from .selection import SelectionResolver
from .session import GenerationFence, SessionKey
from .settings import SelectSettings
from .store import ResultStore

logger = logging.getLogger(__name__)


class PaginatedSelect:
    """
    Orchestrates the data behind one remote-backed, searchable, paginated select.

    The instance owns all of its state and must be driven from a single asyncio
    event loop. Every transition runs synchronously between two awaits on that
    loop, so page completions, label injections and caller input are applied
    one at a time.

    Typical use:

        async with PaginatedSelect(adapter, value=["u1"], multiple=True) as select:
            select.set_search("ali")
            ...
            select.request_next_page()  # forward "scrolled near bottom" events
            render(select.snapshot())

    Adapter failures never propagate to the caller. They stop paging (page
    fetches) or leave ids unresolved (label lookups) and are reported to the
    optional `on_error` callback.
    """

    def __init__(
        self,
        adapter: DataAdapter,
        *,
        value: Any = None,
        multiple: bool = False,
        params: Optional[Dict[str, Any]] = None,
        dependency_token: Any = None,
        page_size: Optional[int] = None,
        debug: Optional[bool] = None,
        settings: Optional[SelectSettings] = None,
        on_error: Optional[Callable[[PaginatedSelectError], None]] = None,
        on_update: Optional[Callable[[SelectSnapshot], None]] = None,
    ):
        for name in ("list", "get_label", "get_value"):
            if not callable(getattr(adapter, name, None)):
                raise InvalidConfigurationError(f"Adapter is missing required callable '{name}'.")

        if settings is None:
            settings = SelectSettings.from_env(page_size=page_size, debug=debug)
        elif page_size is not None or debug is not None:
            settings = settings.with_overrides(page_size=page_size, debug=debug)
        self.settings = settings

        self.adapter = adapter
        self.multiple = multiple
        self.instance_id = generate_instance_id()
        self._log = DiagnosticLogger(logger, self.instance_id, settings.debug)
        self._on_error = on_error
        self._on_update = on_update

        self._value = value
        self._selection: List[str] = normalize_selection(value)
        self._params = params
        self._dependency_token = dependency_token
        self._settled_search = ""
        self._session_key: Optional[SessionKey] = None
        self._started = False
        self._closed = False

        self.store = ResultStore()
        self.fence = GenerationFence(self.instance_id)
        self.pagination = PaginationController(
            adapter,
            self.store,
            self.fence,
            page_size=settings.page_size,
            selected_values=lambda: self._selection,
            timeout=settings.fetch_timeout_seconds or None,
            spawn=self._spawn,
            log=self._log,
            on_error=self._emit_error,
            on_change=self._notify,
        )
        self.resolver = SelectionResolver(
            adapter,
            self.store,
            self.fence,
            timeout=settings.lookup_timeout_seconds or None,
            spawn=self._spawn,
            log=self._log,
            on_error=self._emit_error,
            on_change=self._notify,
        )
        self.debouncer = SearchDebouncer(self._on_search_settled, settings.debounce_seconds)

        self._log.debug(
            "PaginatedSelect created.",
            extra={
                "page_size": settings.page_size,
                "multiple": multiple,
                "point_lookup": supports_point_lookup(adapter),
                "bulk_lookup": supports_bulk_lookup(adapter),
            },
        )

    # --- lifecycle ---

    def start(self) -> None:
        """Loads page 1 of the initial session. Must be called from a running event loop."""
        if self._closed:
            raise InvalidConfigurationError("PaginatedSelect has been closed.")
        if self._started:
            return
        self._started = True
        self._sync_session()

    async def aclose(self) -> None:
        """Tears the instance down: cancels the debounce timer and any in-flight adapter calls."""
        if self._closed:
            return
        self._closed = True
        pending = [t for t in (self.debouncer.task, self.pagination.task, self.resolver.task) if t is not None]
        self.debouncer.cancel()
        self.pagination.cancel()
        self.resolver.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._log.debug("PaginatedSelect closed.")

    async def __aenter__(self) -> "PaginatedSelect":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def wait_until_idle(self, include_debounce: bool = True) -> None:
        """Waits until no search emission, page fetch or label resolution is pending."""
        while True:
            pending = [t for t in (self.pagination.task, self.resolver.task) if t is not None and not t.done()]
            if include_debounce and self.debouncer.pending:
                pending.append(self.debouncer.task)
            if not pending:
                return
            await asyncio.wait(pending)

    # --- caller input ---

    def set_search(self, term: Optional[str]) -> None:
        """Raw search input; it takes effect once it settles."""
        self.debouncer.feed(term or "")

    def set_params(self, params: Optional[Dict[str, Any]]) -> None:
        self._params = params
        self._sync_session()

    def set_dependency_token(self, token: Any) -> None:
        self._dependency_token = token
        self._sync_session()

    def set_value(self, value: Any) -> None:
        """Updates the externally controlled selection."""
        self._value = value
        self._selection = normalize_selection(value)
        if self._started and not self._closed:
            self.resolver.refresh(self._selection)
        self._notify()

    def request_next_page(self) -> Optional[asyncio.Task]:
        """Input for 'scrolled near the bottom' events from the rendering layer."""
        if not self._started or self._closed:
            return None
        return self.pagination.request_next_page()

    # --- render-facing output ---

    @property
    def options(self) -> Tuple[Option, ...]:
        return self.store.options

    @property
    def value(self) -> Optional[Union[str, List[str]]]:
        return effective_value(self._value, self.store, self.multiple)

    @property
    def selection(self) -> List[str]:
        return list(self._selection)

    @property
    def busy(self) -> bool:
        return self.pagination.state.fetching or self.resolver.busy

    @property
    def has_more(self) -> bool:
        return self.pagination.state.has_more

    @property
    def search(self) -> str:
        return self._settled_search

    @property
    def session_key(self) -> Optional[SessionKey]:
        return self._session_key

    def snapshot(self) -> SelectSnapshot:
        return SelectSnapshot(
            options=list(self.store.options),
            value=self.value,
            busy=self.busy,
            has_more=self.has_more,
            page=self.pagination.state.page,
            search=self._settled_search,
        )

    # --- internals ---

    def _sync_session(self) -> bool:
        """Resets paging and reloads page 1 when the session identity changed."""
        if not self._started or self._closed:
            return False
        key = SessionKey.derive(self._dependency_token, self._params, self._settled_search)
        if key == self._session_key:
            return False
        self._session_key = key
        generation = self.fence.advance()
        self._log.debug("Session changed.", extra={"generation": generation, "search": key.search})

        self.pagination.reset(self._settled_search, self._params, generation)
        self.pagination.load_first_page()
        self.resolver.refresh(self._selection)
        return True

    def _on_search_settled(self, term: str) -> None:
        self._settled_search = term
        self._sync_session()

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        # Every task of this instance logs with its instance id.
        ctx = contextvars.copy_context()
        ctx.run(select_instance_var.set, self.instance_id)
        return asyncio.get_running_loop().create_task(coro, context=ctx)

    def _notify(self) -> None:
        if self._on_update is None:
            return
        try:
            self._on_update(self.snapshot())
        except Exception:
            logger.exception("PaginatedSelect update listener failed.", extra={"select_instance": self.instance_id})

    def _emit_error(self, error: PaginatedSelectError) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(error)
        except Exception:
            logger.exception("PaginatedSelect error listener failed.", extra={"select_instance": self.instance_id})
