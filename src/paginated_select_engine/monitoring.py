# src/paginated_select_engine/monitoring.py
import logging
from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------------------
# Page fetch metrics
# --------------------------------------------------------------------------------------
SELECT_LIST_FETCHES_TOTAL = Counter(
    "paginated_select_list_fetches_total",
    "Number of adapter list() calls completed, by outcome",
    labelnames=("outcome",),
)

# --------------------------------------------------------------------------------------
# Label lookup metrics
# --------------------------------------------------------------------------------------
SELECT_LOOKUPS_TOTAL = Counter(
    "paginated_select_lookups_total",
    "Number of selected values looked up for labels, by mode and outcome",
    labelnames=("mode", "outcome"),
)

# --------------------------------------------------------------------------------------
# Stale completion fencing
# --------------------------------------------------------------------------------------
SELECT_STALE_COMPLETIONS_DROPPED_TOTAL = Counter(
    "paginated_select_stale_completions_dropped_total",
    "Number of adapter completions discarded because their session generation was superseded",
    labelnames=("operation",),
)

SELECT_ADAPTER_LATENCY_SECONDS = Histogram(
    "paginated_select_adapter_latency_seconds",
    "Latency of adapter calls in seconds",
    labelnames=("operation",),
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30),
)


def observe_list_fetch(outcome: str) -> None:
    SELECT_LIST_FETCHES_TOTAL.labels(outcome).inc()

def observe_lookup(mode: str, outcome: str, count: int = 1) -> None:
    if count:
        SELECT_LOOKUPS_TOTAL.labels(mode, outcome).inc(count)

def observe_stale_completion(operation: str) -> None:
    SELECT_STALE_COMPLETIONS_DROPPED_TOTAL.labels(operation).inc()

def adapter_call_timer(operation: str):
    """Context manager that observes adapter call latency for an operation."""
    return SELECT_ADAPTER_LATENCY_SECONDS.labels(operation).time()
