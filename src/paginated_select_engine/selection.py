# src/paginated_select_engine/selection.py
import asyncio
import logging
from typing import Any, Callable, Coroutine, Dict, Optional, Sequence, Tuple

from .adapter import DataAdapter, call_adapter, supports_bulk_lookup, supports_point_lookup, to_option
from .exceptions import BulkLookupFailedError, LookupFailedError, PaginatedSelectError
from .monitoring import observe_lookup
from .session import GenerationFence
from .store import ResultStore

logger = logging.getLogger(__name__)

# (selection, generation) a resolution was computed against
ResolutionContext = Tuple[Tuple[str, ...], int]


class SelectionResolver:
    """
    Resolves labels for selected values that are not in the result store.

    Runs on its own lane, independent of page fetching. A newer selection or
    session supersedes a running resolution, whose result is then discarded.
    Lookup failures are contained: a failed id stays unresolved until the next
    trigger recomputes the missing values.
    """

    def __init__(
        self,
        adapter: DataAdapter,
        store: ResultStore,
        fence: GenerationFence,
        *,
        timeout: Optional[float] = None,
        spawn: Optional[Callable[[Coroutine[Any, Any, None]], asyncio.Task]] = None,
        log: Optional[logging.LoggerAdapter] = None,
        on_error: Optional[Callable[[PaginatedSelectError], None]] = None,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self._adapter = adapter
        self._store = store
        self._fence = fence
        self._timeout = timeout
        self._spawn = spawn or (lambda coro: asyncio.get_running_loop().create_task(coro))
        self._log = log or logger
        self._on_error = on_error
        self._on_change = on_change

        self._task: Optional[asyncio.Task] = None
        self._context: Optional[ResolutionContext] = None
        self._missing: Tuple[str, ...] = ()

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    @property
    def busy(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def missing_values(self) -> Tuple[str, ...]:
        """Missing values as of the last refresh."""
        return self._missing

    @property
    def can_resolve(self) -> bool:
        return supports_point_lookup(self._adapter) or supports_bulk_lookup(self._adapter)

    def refresh(self, selection: Sequence[str]) -> Optional[asyncio.Task]:
        """
        Recomputes the missing values for `selection` under the current session
        and starts a resolution when any are missing and the adapter can look
        them up.
        """
        context: ResolutionContext = (tuple(selection), self._fence.current)
        if context == self._context and self.busy:
            return self._task

        was_busy = self.busy
        self.cancel()
        self._context = context
        self._missing = tuple(v for v in selection if v not in self._store)

        if not self._missing or not self.can_resolve:
            if self._missing:
                self._log.debug("Selected values missing but adapter has no lookup.", extra={"missing": list(self._missing)})
            if was_busy:
                self._changed()
            return None

        self._log.debug("Resolving labels for selected values.", extra={"missing": list(self._missing)})
        self._task = self._spawn(self._run(self._missing, context))
        self._changed()
        return self._task

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self, missing: Tuple[str, ...], context: ResolutionContext) -> None:
        try:
            resolved = await self._resolve(missing)

            if not self._fence.check(context[1], "lookup") or context != self._context:
                self._log.debug("Resolution superseded. Discarding.", extra={"missing": list(missing)})
                return

            options = []
            for value in missing:
                item = resolved.get(value)
                if item is None:
                    continue
                try:
                    options.append(to_option(self._adapter, item, value=value))
                except Exception as e:
                    self._report(LookupFailedError(value, e))

            injected = self._store.inject_front(options)
            self._log.debug(
                "Injected resolved labels.",
                extra={"injected": injected, "unresolved": [v for v in missing if v not in self._store]},
            )
        finally:
            if self._task is asyncio.current_task():
                self._task = None
                self._changed()

    async def _resolve(self, missing: Tuple[str, ...]) -> Dict[str, Any]:
        use_bulk = supports_bulk_lookup(self._adapter) and (
            len(missing) > 1 or not supports_point_lookup(self._adapter)
        )
        if use_bulk:
            return await self._resolve_bulk(missing)

        items = await asyncio.gather(*(self._resolve_one(value) for value in missing))
        return {value: item for value, item in zip(missing, items) if item is not None}

    async def _resolve_bulk(self, missing: Tuple[str, ...]) -> Dict[str, Any]:
        try:
            items = await call_adapter("get_by_ids", self._adapter.get_by_ids, list(missing), timeout=self._timeout)
            by_value = {self._adapter.get_value(item): item for item in (items or []) if item is not None}
        except Exception as e:
            observe_lookup("bulk", "failure", len(missing))
            self._log.warning("Bulk label lookup failed.", extra={"missing": list(missing), "error": repr(e)})
            self._report(BulkLookupFailedError(missing, e))
            return {}

        resolved = {value: by_value[value] for value in missing if value in by_value}
        observe_lookup("bulk", "resolved", len(resolved))
        observe_lookup("bulk", "unresolved", len(missing) - len(resolved))
        return resolved

    async def _resolve_one(self, value: str) -> Optional[Any]:
        try:
            item = await call_adapter("get_by_id", self._adapter.get_by_id, value, timeout=self._timeout)
        except Exception as e:
            observe_lookup("single", "failure")
            self._log.warning("Label lookup failed.", extra={"value": value, "error": repr(e)})
            self._report(LookupFailedError(value, e))
            return None
        observe_lookup("single", "resolved" if item is not None else "unresolved")
        return item

    def _report(self, error: PaginatedSelectError) -> None:
        if self._on_error is not None:
            self._on_error(error)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()
