# tests/unit/test_adapter.py
import asyncio

import pytest

from paginated_select_engine.adapter import (
    DataAdapter,
    call_adapter,
    make_adapter,
    supports_bulk_lookup,
    supports_point_lookup,
    to_option,
)
from paginated_select_engine.exceptions import AdapterTimeoutError


def _list(request):
    return {"items": [], "total": 0}


def test_make_adapter_requires_callables():
    with pytest.raises(TypeError):
        make_adapter(list=None, get_label=str, get_value=str)

def test_make_adapter_capabilities():
    """
    GIVEN adapters built with and without the optional lookups
    WHEN their capabilities are inspected
    THEN only the provided lookups are reported.
    """
    bare = make_adapter(list=_list, get_label=str, get_value=str)
    point = make_adapter(list=_list, get_label=str, get_value=str, get_by_id=lambda i: None)
    bulk = make_adapter(list=_list, get_label=str, get_value=str, get_by_ids=lambda ids: [])

    assert isinstance(bare, DataAdapter)
    assert (supports_point_lookup(bare), supports_bulk_lookup(bare)) == (False, False)
    assert (supports_point_lookup(point), supports_bulk_lookup(point)) == (True, False)
    assert (supports_point_lookup(bulk), supports_bulk_lookup(bulk)) == (False, True)

def test_to_option_uses_adapter_mapping_or_explicit_value():
    adapter = make_adapter(list=_list, get_label=lambda u: u["name"], get_value=lambda u: u["id"])
    user = {"id": "u1", "name": "Alice"}

    assert to_option(adapter, user).model_dump() == {"value": "u1", "label": "Alice"}
    assert to_option(adapter, user, value="requested").value == "requested"


@pytest.mark.asyncio
async def test_call_adapter_accepts_sync_and_async_callables():
    async def async_double(x):
        return x * 2

    assert await call_adapter("get_by_id", lambda x: x + 1, 1) == 2
    assert await call_adapter("get_by_id", async_double, 2) == 4

@pytest.mark.asyncio
async def test_call_adapter_times_out():
    async def never_returns(request):
        await asyncio.sleep(10)

    with pytest.raises(AdapterTimeoutError) as exc_info:
        await call_adapter("list", never_returns, None, timeout=0.01)

    assert exc_info.value.operation == "list"
    assert exc_info.value.timeout == 0.01

@pytest.mark.asyncio
async def test_call_adapter_propagates_adapter_errors():
    async def broken(request):
        raise ConnectionError("backend down")

    with pytest.raises(ConnectionError):
        await call_adapter("list", broken, None, timeout=1)
