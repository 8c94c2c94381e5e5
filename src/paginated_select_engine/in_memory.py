# src/paginated_select_engine/in_memory.py
import asyncio
import logging
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional, Sequence

from .adapter import CallableAdapter, make_adapter
from .models import ListRequest

logger = logging.getLogger(__name__)

PaginationStyle = Literal["total", "has_more"]


class InMemoryDataSource:
    """
    A searchable, filterable dataset served page by page, with optional
    simulated latency. Useful for demos, tests and prototyping a select before
    the real backend exists.

    - search: case-insensitive substring match over `search_fields`
    - params: every non-None entry must equal the item's field of the same name
    - pagination: answers with `total` or with `hasMore`
    """

    def __init__(
        self,
        items: Iterable[Mapping[str, Any]],
        *,
        value_key: str = "id",
        label_key: str = "name",
        search_fields: Optional[Sequence[str]] = None,
        pagination: PaginationStyle = "total",
        latency: float = 0.0,
    ):
        if pagination not in ("total", "has_more"):
            raise ValueError(f"Unknown pagination style '{pagination}'.")
        self.items: List[Mapping[str, Any]] = list(items)
        self.value_key = value_key
        self.label_key = label_key
        self.search_fields = list(search_fields or [label_key])
        self.pagination = pagination
        self.latency = latency

    async def _delay(self) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)

    def _matches(self, item: Mapping[str, Any], search: Optional[str], params: Optional[Dict[str, Any]]) -> bool:
        if search:
            needle = search.lower()
            if not any(needle in str(item.get(field, "")).lower() for field in self.search_fields):
                return False
        for key, expected in (params or {}).items():
            if expected is not None and item.get(key) != expected:
                return False
        return True

    async def list(self, request: ListRequest) -> Dict[str, Any]:
        await self._delay()
        matched = [item for item in self.items if self._matches(item, request.search, request.params)]
        start = (request.page - 1) * request.page_size
        end = start + request.page_size
        page_items = matched[start:end]
        if self.pagination == "total":
            return {"items": page_items, "total": len(matched)}
        return {"items": page_items, "hasMore": end < len(matched)}

    async def get_by_id(self, value: str) -> Optional[Mapping[str, Any]]:
        await self._delay()
        for item in self.items:
            if self.get_value(item) == value:
                return item
        return None

    async def get_by_ids(self, values: List[str]) -> List[Mapping[str, Any]]:
        await self._delay()
        wanted = set(values)
        return [item for item in self.items if self.get_value(item) in wanted]

    def get_label(self, item: Mapping[str, Any]) -> str:
        return str(item[self.label_key])

    def get_value(self, item: Mapping[str, Any]) -> str:
        return str(item[self.value_key])

    def as_adapter(self, point_lookup: bool = True, bulk_lookup: bool = True) -> CallableAdapter:
        """Builds an adapter over this source, optionally without point or bulk lookup."""
        return make_adapter(
            list=self.list,
            get_label=self.get_label,
            get_value=self.get_value,
            get_by_id=self.get_by_id if point_lookup else None,
            get_by_ids=self.get_by_ids if bulk_lookup else None,
        )
