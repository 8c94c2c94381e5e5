# src/paginated_select_engine/session.py
import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .monitoring import observe_stale_completion

logger = logging.getLogger(__name__)


def _canonical(value: Any) -> Any:
    """Rewrites mappings as key-sorted pairs keyed by repr, for keys that cannot be compared."""
    if isinstance(value, Mapping):
        pairs = sorted(((repr(k), _canonical(v)) for k, v in value.items()), key=lambda kv: kv[0])
        return [list(pair) for pair in pairs]
    if isinstance(value, (list, tuple)):
        return [_canonical(v) for v in value]
    return value


def _serialize(value: Any) -> str:
    """Canonical text form of an opaque value; equal inputs give equal output."""
    if value is None:
        return ""
    try:
        return json.dumps(value, sort_keys=True, default=repr, separators=(",", ":"))
    except TypeError:
        # Mixed key types cannot be sorted
        return json.dumps(_canonical(value), default=repr, separators=(",", ":"))


@dataclass(frozen=True)
class SessionKey:
    """
    Identity of the data universe a select instance is browsing. Two equal keys
    mean the same dependency token, the same filter params and the same settled
    search term.
    """

    dependency_token: str
    params: str
    search: str

    @classmethod
    def derive(cls, dependency_token: Any, params: Optional[Mapping[str, Any]], search: str) -> "SessionKey":
        return cls(
            dependency_token=_serialize(dependency_token),
            params=_serialize(params),
            search=search or "",
        )


class GenerationFence:
    """
    Monotonic generation counter used to fence off completions of adapter calls
    that were issued under a session which has since been replaced.
    """

    def __init__(self, owner: str = "<not-set>"):
        self._generation = 0
        self.owner = owner

    @property
    def current(self) -> int:
        return self._generation

    def advance(self) -> int:
        self._generation += 1
        return self._generation

    def check(self, generation: int, operation: str) -> bool:
        """
        Checks if a completion stamped with `generation` is still current.

        Returns:
            False if the completion is stale and must be discarded, True otherwise.
        """
        if generation < self._generation:
            observe_stale_completion(operation)
            logger.debug(
                "Completion has stale generation. Discarding.",
                extra={
                    "select_instance": self.owner,
                    "operation": operation,
                    "completion_generation": generation,
                    "current_generation": self._generation,
                },
            )
            return False
        return True
