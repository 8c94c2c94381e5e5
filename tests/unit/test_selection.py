# tests/unit/test_selection.py
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from paginated_select_engine.adapter import make_adapter
from paginated_select_engine.exceptions import BulkLookupFailedError, LookupFailedError
from paginated_select_engine.models import Option
from paginated_select_engine.selection import SelectionResolver
from paginated_select_engine.session import GenerationFence
from paginated_select_engine.store import ResultStore

pytestmark = pytest.mark.asyncio


async def _no_list(request):
    raise AssertionError("list must not be called by the resolver")


@pytest.fixture
def by_id(users):
    return {u["id"]: u for u in users}


@pytest.fixture
def store() -> ResultStore:
    return ResultStore([Option(value="u2", label="User 2")])


@pytest.fixture
def fence() -> GenerationFence:
    fence = GenerationFence("PS:test")
    fence.advance()
    return fence


@pytest.fixture
def on_error() -> MagicMock:
    return MagicMock()


@pytest.fixture
def make_resolver(store, fence, on_error):
    def _make(get_by_id=None, get_by_ids=None, **kwargs):
        adapter = make_adapter(
            list=_no_list,
            get_label=lambda u: u["name"],
            get_value=lambda u: u["id"],
            get_by_id=get_by_id,
            get_by_ids=get_by_ids,
        )
        return SelectionResolver(adapter, store, fence, on_error=on_error, **kwargs)
    return _make


async def test_bulk_resolution_injects_found_values_and_leaves_the_rest(make_resolver, store, by_id):
    """
    GIVEN a selection of u1 and u3 with only u2 in the store
    WHEN the bulk lookup resolves u1 only
    THEN u1 is injected at the front and u3 stays unresolved.
    """
    # ARRANGE
    get_by_ids = AsyncMock(return_value=[by_id["u1"]])
    get_by_id = AsyncMock()
    resolver = make_resolver(get_by_id=get_by_id, get_by_ids=get_by_ids)

    # ACT
    task = resolver.refresh(["u1", "u3"])
    assert resolver.busy is True
    await task

    # ASSERT
    get_by_ids.assert_awaited_once_with(["u1", "u3"])
    assert resolver.missing_values == ("u1", "u3")
    get_by_id.assert_not_awaited()
    assert store.values == ["u1", "u2"]
    assert store.get("u1").label == "User 1"
    assert "u3" not in store
    assert resolver.busy is False

async def test_nothing_missing_makes_no_calls(make_resolver):
    get_by_id = AsyncMock()
    get_by_ids = AsyncMock()
    resolver = make_resolver(get_by_id=get_by_id, get_by_ids=get_by_ids)

    assert resolver.refresh(["u2"]) is None
    assert resolver.refresh([]) is None

    assert resolver.busy is False
    get_by_id.assert_not_awaited()
    get_by_ids.assert_not_awaited()

async def test_single_missing_value_uses_point_lookup(make_resolver, store, by_id):
    get_by_id = AsyncMock(return_value=by_id["u7"])
    get_by_ids = AsyncMock()
    resolver = make_resolver(get_by_id=get_by_id, get_by_ids=get_by_ids)

    await resolver.refresh(["u7"])

    get_by_id.assert_awaited_once_with("u7")
    get_by_ids.assert_not_awaited()
    assert store.values[0] == "u7"

async def test_bulk_only_adapter_is_used_for_a_single_value(make_resolver, store, by_id):
    get_by_ids = AsyncMock(return_value=[by_id["u3"]])
    resolver = make_resolver(get_by_ids=get_by_ids)

    await resolver.refresh(["u3"])

    get_by_ids.assert_awaited_once_with(["u3"])
    assert "u3" in store

async def test_bulk_failure_leaves_every_value_unresolved(make_resolver, store, on_error):
    """
    GIVEN an adapter with both lookups whose bulk lookup fails
    WHEN two missing values are resolved
    THEN no value is injected, no per-id fallback runs and the failure is reported.
    """
    # ARRANGE
    get_by_ids = AsyncMock(side_effect=ConnectionError("backend down"))
    get_by_id = AsyncMock()
    resolver = make_resolver(get_by_id=get_by_id, get_by_ids=get_by_ids)

    # ACT
    await resolver.refresh(["u1", "u3"])

    # ASSERT
    assert store.values == ["u2"]
    get_by_id.assert_not_awaited()
    error = on_error.call_args.args[0]
    assert isinstance(error, BulkLookupFailedError)
    assert list(error.values) == ["u1", "u3"]
    assert resolver.busy is False

async def test_point_lookup_failures_are_isolated(make_resolver, store, by_id, on_error):
    """
    GIVEN a point-lookup adapter where u3 fails and u1 succeeds
    WHEN both are resolved concurrently
    THEN u1 is injected, u3 stays unresolved and one LookupFailedError is reported.
    """
    # ARRANGE
    async def lookup(value):
        if value == "u3":
            raise TimeoutError("slow backend")
        return by_id[value]

    resolver = make_resolver(get_by_id=AsyncMock(side_effect=lookup))

    # ACT
    await resolver.refresh(["u1", "u3"])

    # ASSERT
    assert store.values == ["u1", "u2"]
    on_error.assert_called_once()
    error = on_error.call_args.args[0]
    assert isinstance(error, LookupFailedError)
    assert error.value == "u3"

async def test_lookup_returning_none_stays_unresolved(make_resolver, store, on_error):
    resolver = make_resolver(get_by_id=AsyncMock(return_value=None))

    await resolver.refresh(["u9"])

    assert "u9" not in store
    on_error.assert_not_called()

async def test_injection_keeps_request_order(make_resolver, store, by_id):
    get_by_ids = AsyncMock(return_value=[by_id["u5"], by_id["u4"]])
    resolver = make_resolver(get_by_ids=get_by_ids)

    await resolver.refresh(["u4", "u5"])

    assert store.values == ["u4", "u5", "u2"]

async def test_adapter_without_lookup_leaves_values_missing(make_resolver, store):
    resolver = make_resolver()

    assert resolver.can_resolve is False
    assert resolver.refresh(["u1"]) is None
    assert resolver.missing_values == ("u1",)
    assert "u1" not in store

async def test_unchanged_selection_reuses_the_running_resolution(make_resolver, by_id, gate_factory):
    # ARRANGE
    gate = gate_factory()

    async def lookup(value):
        await gate.wait()
        return by_id[value]

    get_by_id = AsyncMock(side_effect=lookup)
    resolver = make_resolver(get_by_id=get_by_id)

    # ACT
    first = resolver.refresh(["u1"])
    second = resolver.refresh(["u1"])
    gate.release()
    await first

    # ASSERT
    assert second is first
    get_by_id.assert_awaited_once_with("u1")

async def test_newer_selection_supersedes_running_resolution(make_resolver, store, by_id, gate_factory):
    """
    GIVEN a resolution for u1 still waiting on the backend
    WHEN the selection changes to u4
    THEN the u1 resolution is cancelled and only u4 is injected.
    """
    # ARRANGE
    gate = gate_factory()

    async def lookup(value):
        if value == "u1":
            await gate.wait()
        return by_id[value]

    resolver = make_resolver(get_by_id=AsyncMock(side_effect=lookup))
    first = resolver.refresh(["u1"])
    await asyncio.sleep(0)

    # ACT
    second = resolver.refresh(["u4"])
    gate.release()
    await second
    await asyncio.gather(first, return_exceptions=True)

    # ASSERT
    assert first.cancelled()
    assert store.values == ["u4", "u2"]

async def test_resolution_from_superseded_session_is_discarded(make_resolver, store, fence, by_id, gate_factory):
    # ARRANGE
    gate = gate_factory()

    async def lookup(value):
        await gate.wait()
        return by_id[value]

    resolver = make_resolver(get_by_id=AsyncMock(side_effect=lookup))
    task = resolver.refresh(["u1"])
    await asyncio.sleep(0)

    # ACT
    fence.advance()
    gate.release()
    await task

    # ASSERT
    assert "u1" not in store
    assert resolver.busy is False

async def test_lookup_timeout_is_reported(make_resolver, store, on_error):
    async def hangs(value):
        await asyncio.sleep(10)

    resolver = make_resolver(get_by_id=hangs, timeout=0.01)

    await resolver.refresh(["u1"])

    assert "u1" not in store
    assert isinstance(on_error.call_args.args[0], LookupFailedError)
