"""Search index exceptions."""

from __future__ import annotations


class SearchIndexError(Exception):
    """Base exception for search index errors."""


class QueryError(SearchIndexError):
    """Raised when a search request fails validation, before any network call."""


class EmptyQueryError(QueryError):
    """Raised when the caller supplied an empty query string."""

    def __init__(self) -> None:
        super().__init__("Query string must not be empty.")


class MalformedQueryError(QueryError):
    """Raised when the query-language parser rejects a query."""

    def __init__(self, raw_query: str) -> None:
        self.raw_query = raw_query
        super().__init__(f"Malformed query: {raw_query!r}")


class InvalidParameterError(QueryError):
    """Raised for a non-numeric or negative pagination parameter."""

    def __init__(self, key: str, value: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid value for '{key}': {value!r}")


class BackendError(SearchIndexError):
    """The search backend answered a query with an error.

    ``url`` is the internal request URL.  It exposes the filter structure and
    is meant for logs only, so it is kept out of the exception message.
    """

    def __init__(self, message: str, *, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class ClientQueryError(BackendError):
    """The backend rejected the query (HTTP 400)."""

    def __init__(self, url: str) -> None:
        super().__init__("Search backend rejected the query.", status_code=400, url=url)


class ServerError(BackendError):
    """The backend failed while running the query (HTTP 500)."""

    def __init__(self, url: str) -> None:
        super().__init__("Search backend failed to run the query.", status_code=500, url=url)


class UnexpectedResponseError(BackendError):
    """The backend answered with an unknown status or an unreadable body."""

    def __init__(self, url: str, status_code: int, reason: str = "unexpected response") -> None:
        self.reason = reason
        super().__init__(f"Search backend returned an unusable response ({reason}).", status_code=status_code, url=url)


class TransportError(SearchIndexError):
    """Raised when the search backend cannot be reached."""


class InvalidOrgIdError(SearchIndexError, ValueError):
    """Raised when an organization id cannot name a search partition."""

    def __init__(self, org_id: str) -> None:
        self.org_id = org_id
        super().__init__(f"Invalid organization id: {org_id!r}")


class UnsupportedTypeError(SearchIndexError, ValueError):
    """Raised when a maintenance call names an object type outside the allow-list."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"Unsupported index type: {type_name!r}")


class InternalConsistencyError(AssertionError):
    """A filter-bearing request was about to go out without organization scoping.

    Indicates a bug in this package; callers should not try to handle it.
    """
