# src/paginated_select_engine/exceptions.py

class PaginatedSelectError(Exception):
    """Base exception for all paginated select engine errors."""
    def __init__(self, message="An unspecified error occurred in the paginated select engine."):
        self.message = message
        super().__init__(self.message)


class InvalidConfigurationError(PaginatedSelectError):
    """Raised when a select instance is constructed with invalid settings."""
    def __init__(self, message="Invalid configuration provided for paginated select."):
        self.message = message
        super().__init__(self.message)


class AdapterTimeoutError(PaginatedSelectError):
    """Raised when an adapter call does not complete within the configured timeout."""
    def __init__(self, operation: str, timeout: float):
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"Adapter call '{operation}' did not complete within {timeout}s.")


class FetchFailedError(PaginatedSelectError):
    """
    A `list` call failed. The engine stops paging for the current session and
    leaves the result store untouched; nothing is retried automatically.
    """
    def __init__(self, page: int, cause: BaseException):
        self.page = page
        self.cause = cause
        super().__init__(f"Fetching page {page} failed: {cause!r}")


class LookupFailedError(PaginatedSelectError):
    """A single `get_by_id` lookup failed. The id is treated as unresolved."""
    def __init__(self, value: str, cause: BaseException):
        self.value = value
        self.cause = cause
        super().__init__(f"Label lookup for '{value}' failed: {cause!r}")


class BulkLookupFailedError(PaginatedSelectError):
    """A `get_by_ids` batch failed. Every id in the batch is treated as unresolved."""
    def __init__(self, values, cause: BaseException):
        self.values = list(values)
        self.cause = cause
        super().__init__(f"Bulk label lookup for {len(self.values)} ids failed: {cause!r}")


class MalformedResponseError(PaginatedSelectError):
    """
    Reported when a `list` response carries neither a usable `hasMore` nor a
    usable `total`. Paging stops for the session.
    """
    def __init__(self, page: int):
        self.page = page
        super().__init__(f"Response for page {page} carried no usable pagination signal; paging stopped.")
