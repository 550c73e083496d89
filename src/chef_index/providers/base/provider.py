"""Base search provider — Abstract interface for a search backend dialect.

Every supported backend implements this interface.  A provider is
responsible for:
  1. Naming the index bookkeeping fields (see ``fields.py``)
  2. Building type and organization filter expressions
  3. Rendering a ``QueryDescriptor`` into a request URL
  4. Decoding the backend's JSON envelope into a ``SearchResult``
  5. Describing the maintenance endpoints (update, commit, ping)

Providers hold no state and never talk to the network themselves; the
``SearchIndex`` facade owns the transport.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import quote_plus
from xml.sax.saxutils import escape

from chef_index.exceptions import (
    ClientQueryError,
    InternalConsistencyError,
    ServerError,
    UnexpectedResponseError,
)
from chef_index.models.query import Backend, IndexKind, QueryDescriptor
from chef_index.models.result import SearchResult
from chef_index.providers.base.fields import FieldMap, field_map, partition_name

XML_PROLOG = "<?xml version='1.0' encoding='UTF-8'?>"


def url_encode(value: str) -> str:
    """Form-encode a single query-string value (spaces become ``+``)."""
    return quote_plus(value, safe="")


class SearchProvider(ABC):
    """Abstract base class for search backend dialects.

    Subclasses set the endpoint paths and envelope field names as class
    attributes and implement the filter and URL rendering hooks.
    """

    search_path: str
    ping_path: str
    update_path: str
    update_content_type: str = "text/xml"

    response_field: str
    num_found_field: str
    docs_field: str

    @property
    @abstractmethod
    def backend(self) -> Backend:
        """Backend tag this provider speaks for."""

    @property
    def fields(self) -> FieldMap:
        return field_map(self.backend)

    # ── Filters ──────────────────────────────────────────────────────────

    @abstractmethod
    def type_filter(self, kind: IndexKind) -> str:
        """Filter expression restricting results to one object-type family."""

    @abstractmethod
    def scope_to_org(self, filter_query: str, org_id: str) -> str:
        """Prefix ``filter_query`` with the organization partition clause."""

    @abstractmethod
    def org_filter_prefix(self) -> str:
        """Literal every organization-scoped filter query starts with."""

    def assert_org_filter(self, filter_query: str) -> None:
        """Refuse to render a filter query that is not scoped to an organization."""
        prefix = self.org_filter_prefix()
        if not filter_query.startswith(prefix):
            raise InternalConsistencyError(
                f"{self.backend.value} filter query is not scoped to an organization: expected prefix {prefix!r}"
            )

    def sort_clause(self) -> str:
        # The identifier is the only sortable field in the index.
        return f"{self.fields.id} asc"

    # ── Requests ─────────────────────────────────────────────────────────

    def search_url(self, query: QueryDescriptor) -> str:
        """Render ``query`` into a request path relative to the backend base URL.

        Raises:
            InternalConsistencyError: If the descriptor was built for another
                backend or its filter lacks organization scoping.
        """
        if query.backend is not self.backend:
            raise InternalConsistencyError(
                f"Query built for {query.backend.value} rendered by the {self.backend.value} provider"
            )
        self.assert_org_filter(query.filter_query)
        return self._render_search_url(query)

    @abstractmethod
    def _render_search_url(self, query: QueryDescriptor) -> str:
        """Backend-specific URL template."""

    # ── Responses ────────────────────────────────────────────────────────

    def parse_response(self, status_code: int, body: bytes | str, *, url: str, query: QueryDescriptor) -> SearchResult:
        """Decode a search response into a ``SearchResult``.

        Args:
            status_code: HTTP status returned by the backend.
            body: Raw response body.
            url: The request URL, attached to errors for logging.
            query: The descriptor the request was rendered from.

        Raises:
            ClientQueryError: On HTTP 400.
            ServerError: On HTTP 500.
            UnexpectedResponseError: On any other status, or a 200 whose body
                does not have the expected shape.
        """
        if status_code == 400:
            raise ClientQueryError(url)
        if status_code == 500:
            raise ServerError(url)
        if status_code != 200:
            raise UnexpectedResponseError(url, status_code, f"HTTP {status_code}")

        try:
            data = json.loads(body)
            envelope = data[self.response_field]
            docs = self.unwrap_docs(envelope[self.docs_field])
            return SearchResult(
                offset=self.response_offset(envelope, query),
                total_matches=envelope[self.num_found_field],
                ids=[self._first_value(doc[self.fields.id]) for doc in docs],
            )
        except (ValueError, KeyError, TypeError) as e:
            # json and pydantic validation errors are both ValueErrors
            raise UnexpectedResponseError(url, status_code, "malformed body") from e

    def unwrap_docs(self, docs: list[Any]) -> list[dict[str, Any]]:
        return docs

    @abstractmethod
    def response_offset(self, envelope: dict[str, Any], query: QueryDescriptor) -> int:
        """Offset of the first returned document."""

    # ── Maintenance ──────────────────────────────────────────────────────

    def delete_query(self, org_id: str, type_name: str | None = None) -> str:
        """Lucene delete-by-query expression for an organization, optionally one type."""
        query = f"{self.fields.database}:{partition_name(org_id)}"
        if type_name is not None:
            query += f" AND {self.fields.type}:{type_name}"
        expected = f"{self.fields.database}:chef_"
        if not query.startswith(expected):
            raise InternalConsistencyError(f"Delete query is not scoped to an organization: {query!r}")
        return query

    def delete_payload(self, org_id: str, type_name: str | None = None) -> str:
        return f"{XML_PROLOG}<delete><query>{escape(self.delete_query(org_id, type_name))}</query></delete>"

    @abstractmethod
    def commit_payload(self) -> str | None:
        """Update body that commits pending changes, or None if the backend has no commit."""

    # ── Helpers ──────────────────────────────────────────────────────────

    @staticmethod
    def _first_value(val: Any) -> Any:
        """Single-valued fields may come back as one-element lists; unwrap transparently."""
        if isinstance(val, list) and len(val) == 1:
            return val[0]
        return val
