"""Data-orchestration engine for remote-backed, searchable, paginated select controls."""

from .adapter import CallableAdapter, DataAdapter, make_adapter
from .debounce import SearchDebouncer
from .exceptions import (
    AdapterTimeoutError,
    BulkLookupFailedError,
    FetchFailedError,
    InvalidConfigurationError,
    LookupFailedError,
    MalformedResponseError,
    PaginatedSelectError,
)
from .guard import effective_value, normalize_selection
from .in_memory import InMemoryDataSource
from .models import (
    ByHasMore,
    ByTotal,
    ListRequest,
    ListResponse,
    Option,
    SelectSnapshot,
    derive_has_more,
)
from .paginated_select import PaginatedSelect
from .pagination import PaginationController, PaginationState
from .selection import SelectionResolver
from .session import GenerationFence, SessionKey
from .settings import SelectSettings
from .store import ResultStore

__all__ = [
    "CallableAdapter",
    "DataAdapter",
    "make_adapter",
    "SearchDebouncer",
    "AdapterTimeoutError",
    "BulkLookupFailedError",
    "FetchFailedError",
    "InvalidConfigurationError",
    "LookupFailedError",
    "MalformedResponseError",
    "PaginatedSelectError",
    "effective_value",
    "normalize_selection",
    "InMemoryDataSource",
    "ByHasMore",
    "ByTotal",
    "ListRequest",
    "ListResponse",
    "Option",
    "SelectSnapshot",
    "derive_has_more",
    "PaginatedSelect",
    "PaginationController",
    "PaginationState",
    "SelectionResolver",
    "GenerationFence",
    "SessionKey",
    "SelectSettings",
    "ResultStore",
]
