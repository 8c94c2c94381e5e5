# src/paginated_select_engine/store.py
from typing import Collection, Dict, Iterable, Iterator, List, Optional, Tuple

from .models import Option


def _dedupe(options: Iterable[Option]) -> List[Option]:
    """Keeps the first occurrence of every value."""
    seen = set()
    out: List[Option] = []
    for option in options:
        if option.value not in seen:
            seen.add(option.value)
            out.append(option)
    return out


class ResultStore:
    """
    Ordered collection of resolved options, unique by value.

    Order is insertion order, except that a page-1 reload keeps the currently
    selected entries ahead of the fresh page and label injections go to the
    front.
    """

    def __init__(self, options: Optional[Iterable[Option]] = None):
        self._options: List[Option] = _dedupe(options or [])
        self._index: Dict[str, Option] = {o.value: o for o in self._options}

    def _replace(self, options: List[Option]) -> None:
        self._options = options
        self._index = {o.value: o for o in options}

    @property
    def options(self) -> Tuple[Option, ...]:
        return tuple(self._options)

    @property
    def values(self) -> List[str]:
        return [o.value for o in self._options]

    def __contains__(self, value: object) -> bool:
        return value in self._index

    def __len__(self) -> int:
        return len(self._options)

    def __iter__(self) -> Iterator[Option]:
        return iter(self._options)

    def get(self, value: str) -> Optional[Option]:
        return self._index.get(value)

    def has_resolved_label(self, value: str) -> bool:
        """True when `value` is present with a label that is not just the raw id."""
        option = self._index.get(value)
        return option is not None and bool(option.label) and option.label != value

    def merge_first_page(self, fresh: Iterable[Option], selected: Collection[str]) -> None:
        """Replaces the contents with the selected entries followed by a fresh page 1."""
        preserved = [o for o in self._options if o.value in selected]
        self._replace(_dedupe([*preserved, *fresh]))

    def append_page(self, fresh: Iterable[Option]) -> None:
        self._replace(_dedupe([*self._options, *fresh]))

    def inject_front(self, options: Iterable[Option]) -> int:
        """
        Puts `options` in front of the existing entries, skipping values that are
        already present. Returns the number of options injected.
        """
        injected = [o for o in _dedupe(options) if o.value not in self._index]
        if injected:
            self._replace([*injected, *self._options])
        return len(injected)

    def clear(self) -> None:
        self._replace([])
