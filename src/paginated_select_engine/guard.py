# src/paginated_select_engine/guard.py
from typing import Any, Iterable, List, Optional, Union

from .store import ResultStore


def normalize_selection(value: Any) -> List[str]:
    """Normalizes a controlled value (None, a single id or a list of ids) to a list of ids."""
    if value is None or value == "":
        return []
    if isinstance(value, str) or not isinstance(value, Iterable):
        return [str(value)]
    seen = set()
    out: List[str] = []
    for v in value:
        if v is None or v == "":
            continue
        v = str(v)
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out


def effective_value(value: Any, store: ResultStore, multiple: bool) -> Optional[Union[str, List[str]]]:
    """
    The controlled value that is safe to hand to the rendering layer.

    Selected ids without a resolved label are never exposed: in multi-select
    mode they are left out of the list, in single-select mode the value stays
    None until the id resolves.
    """
    selection = normalize_selection(value)
    labeled = [v for v in selection if store.has_resolved_label(v)]
    if multiple:
        return labeled
    if not selection or len(labeled) != len(selection):
        return None
    return selection[0]
