# src/paginated_select_engine/settings.py
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import (
    PAGINATED_SELECT_DEBOUNCE_MS,
    PAGINATED_SELECT_DEBUG,
    PAGINATED_SELECT_FETCH_TIMEOUT_SECONDS,
    PAGINATED_SELECT_LOOKUP_TIMEOUT_SECONDS,
    PAGINATED_SELECT_PAGE_SIZE,
)
from .exceptions import InvalidConfigurationError


class SelectSettings(BaseModel):
    """Per-instance configuration of a paginated select."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    page_size: int = Field(PAGINATED_SELECT_PAGE_SIZE, gt=0, description="Items requested per page.")
    debounce_seconds: float = Field(
        PAGINATED_SELECT_DEBOUNCE_MS / 1000, ge=0, description="Quiet window before a search term settles."
    )
    fetch_timeout_seconds: Optional[float] = Field(
        PAGINATED_SELECT_FETCH_TIMEOUT_SECONDS or None,
        ge=0,
        description="Upper bound for a single list() call. None or 0 disables it.",
    )
    lookup_timeout_seconds: Optional[float] = Field(
        PAGINATED_SELECT_LOOKUP_TIMEOUT_SECONDS or None,
        ge=0,
        description="Upper bound for a get_by_id()/get_by_ids() call. None or 0 disables it.",
    )
    debug: bool = Field(PAGINATED_SELECT_DEBUG, description="Enables diagnostic logging only.")

    @classmethod
    def from_env(cls, **overrides: Any) -> "SelectSettings":
        """
        Builds settings from the environment defaults plus explicit overrides.
        Overrides that are None fall back to the defaults.

        Raises:
            InvalidConfigurationError: if any value fails validation.
        """
        values = {k: v for k, v in overrides.items() if v is not None}
        try:
            return cls(**values)
        except ValidationError as e:
            raise InvalidConfigurationError(f"Invalid select settings: {e}") from e

    def with_overrides(self, **overrides: Any) -> "SelectSettings":
        """Returns a validated copy with the non-None overrides applied."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return type(self)(**values)
        except ValidationError as e:
            raise InvalidConfigurationError(f"Invalid select settings: {e}") from e
