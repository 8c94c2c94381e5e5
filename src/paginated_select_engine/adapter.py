# src/paginated_select_engine/adapter.py
import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, List, Optional, Protocol, TypeVar, Union, runtime_checkable

from .exceptions import AdapterTimeoutError
from .models import ListRequest, Option
from .monitoring import adapter_call_timer

logger = logging.getLogger(__name__)

T = TypeVar("T")

MaybeAwaitable = Union[T, Awaitable[T]]


@runtime_checkable
class DataAdapter(Protocol):
    """
    The integration surface between a select instance and a paged, searchable
    data source. `list`, `get_label` and `get_value` are required. An adapter
    may also expose `get_by_id(id)` and/or `get_by_ids(ids)` to resolve labels
    for selected values that are not in the loaded pages.
    """

    def list(self, request: ListRequest) -> MaybeAwaitable[Any]:
        ...

    def get_label(self, item: Any) -> str:
        ...

    def get_value(self, item: Any) -> str:
        ...


@dataclass(frozen=True)
class CallableAdapter(Generic[T]):
    """A DataAdapter assembled from plain callables. See `make_adapter`."""

    list: Callable[[ListRequest], MaybeAwaitable[Any]]
    get_label: Callable[[T], str]
    get_value: Callable[[T], str]
    get_by_id: Optional[Callable[[str], MaybeAwaitable[Optional[T]]]] = None
    get_by_ids: Optional[Callable[[List[str]], MaybeAwaitable[List[T]]]] = None


def make_adapter(
    list: Callable[[ListRequest], MaybeAwaitable[Any]],
    get_label: Callable[[Any], str],
    get_value: Callable[[Any], str],
    get_by_id: Optional[Callable[[str], MaybeAwaitable[Any]]] = None,
    get_by_ids: Optional[Callable[[List[str]], MaybeAwaitable[List[Any]]]] = None,
) -> CallableAdapter:
    """
    Builds an adapter from functions, e.g. wrappers around an existing API client:

        adapter = make_adapter(
            list=lambda req: api.get_users(page=req.page, limit=req.page_size, search=req.search),
            get_by_id=api.get_user_by_id,
            get_label=lambda user: user["name"],
            get_value=lambda user: user["id"],
        )
    """
    for name, fn in (("list", list), ("get_label", get_label), ("get_value", get_value)):
        if not callable(fn):
            raise TypeError(f"Adapter '{name}' must be callable.")
    return CallableAdapter(
        list=list,
        get_label=get_label,
        get_value=get_value,
        get_by_id=get_by_id,
        get_by_ids=get_by_ids,
    )


def supports_point_lookup(adapter: Any) -> bool:
    return callable(getattr(adapter, "get_by_id", None))


def supports_bulk_lookup(adapter: Any) -> bool:
    return callable(getattr(adapter, "get_by_ids", None))


def to_option(adapter: Any, item: Any, value: Optional[str] = None) -> Option:
    """Maps a domain item to an Option. `value` overrides the adapter's value when given."""
    return Option(
        value=value if value is not None else adapter.get_value(item),
        label=adapter.get_label(item),
    )


async def call_adapter(operation: str, fn: Callable[..., Any], *args: Any, timeout: Optional[float] = None) -> Any:
    """
    Invokes an adapter callable and awaits its result when it is awaitable, so
    both sync and async adapters are accepted. A positive `timeout` bounds the
    wait; exceeding it raises AdapterTimeoutError.
    """
    with adapter_call_timer(operation):
        result = fn(*args)
        if not inspect.isawaitable(result):
            return result
        if not timeout:
            return await result
        try:
            return await asyncio.wait_for(result, timeout)
        except asyncio.TimeoutError:
            raise AdapterTimeoutError(operation, timeout) from None
