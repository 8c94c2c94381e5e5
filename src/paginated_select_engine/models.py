# src/paginated_select_engine/models.py
from typing import Annotated, Any, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

# --- Options ---


class Option(BaseModel):
    """A resolved (value, label) pair as exposed to the rendering layer."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(..., description="Unique, stable identifier of a domain item.")
    label: str = Field(..., description="Display text of the domain item.")


# --- Adapter Request / Response Models ---


class ListRequest(BaseModel):
    """Arguments of a single adapter `list` call."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(..., ge=1, description="1-based page number.")
    page_size: int = Field(..., gt=0, description="Maximum number of items per page.")
    search: Optional[str] = Field(None, description="Settled search term, if any.")
    params: Optional[Any] = Field(
        None, description="Opaque filter parameters forwarded verbatim."
    )


class ByTotal(BaseModel):
    """Total-count pagination: more pages exist while page * page_size < total."""

    kind: Literal["total"] = "total"
    total: int = Field(..., ge=0, strict=True)


class ByHasMore(BaseModel):
    """Cursor-style pagination: the backend says whether more pages exist."""

    kind: Literal["has_more"] = "has_more"
    has_more: bool = Field(..., strict=True)


# A discriminated union over the two pagination signal shapes
PaginationSignal = Annotated[Union[ByTotal, ByHasMore], Field(discriminator="kind")]


class ListResponse(BaseModel):
    """
    One page of domain items plus its pagination signal. A `signal` of None
    means the backend sent neither a usable `hasMore` nor a usable `total`.
    """

    items: List[Any] = Field(default_factory=list)
    signal: Optional[PaginationSignal] = None

    @classmethod
    def by_total(cls, items: List[Any], total: int) -> "ListResponse":
        return cls(items=items, signal=ByTotal(total=total))

    @classmethod
    def by_has_more(cls, items: List[Any], has_more: bool) -> "ListResponse":
        return cls(items=items, signal=ByHasMore(has_more=has_more))

    @classmethod
    def from_raw(cls, raw: Any) -> "ListResponse":
        """
        Normalizes whatever an adapter returned into a ListResponse.

        Accepts an existing ListResponse or a mapping carrying `items` and one of
        `hasMore` / `has_more` / `total`. `hasMore` wins when both are present.

        Raises:
            TypeError: if `raw` is neither a ListResponse nor a mapping.
        """
        if isinstance(raw, ListResponse):
            return raw
        if not isinstance(raw, Mapping):
            raise TypeError(f"Adapter list() returned {type(raw).__name__}, expected a mapping.")

        items = list(raw.get("items") or [])
        return cls(items=items, signal=_parse_signal(raw))


def _parse_signal(raw: Mapping[str, Any]) -> Optional[Union[ByTotal, ByHasMore]]:
    """
    A present `hasMore` decides the signal on its own: when its value is unusable
    the response is malformed even if a valid `total` is also present.
    """
    for key in ("hasMore", "has_more"):
        if key in raw:
            try:
                return ByHasMore(has_more=raw[key])
            except ValidationError:
                return None
    if "total" in raw:
        try:
            return ByTotal(total=raw["total"])
        except ValidationError:
            return None
    return None


def derive_has_more(signal: Optional[Union[ByTotal, ByHasMore]], page: int, page_size: int) -> bool:
    """
    Decides whether another page may be requested after `page` completed.
    A missing signal stops paging rather than looping on ambiguous input.
    """
    if isinstance(signal, ByHasMore):
        return signal.has_more
    if isinstance(signal, ByTotal):
        return page * page_size < signal.total
    return False


# --- Render-facing output ---


class SelectSnapshot(BaseModel):
    """Point-in-time view of a select instance for the rendering layer."""

    model_config = ConfigDict(frozen=True)

    options: List[Option] = Field(default_factory=list)
    value: Optional[Union[str, List[str]]] = Field(
        None, description="Effective controlled value; unresolved ids are hidden."
    )
    busy: bool = Field(False, description="True while a page fetch or label resolution is pending.")
    has_more: bool = True
    page: int = 1
    search: str = ""
