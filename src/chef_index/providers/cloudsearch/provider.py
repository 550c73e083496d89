"""Amazon CloudSearch provider — Structured query filters over ``/search``.

Filters use CloudSearch's structured query language with single-quoted
literals, nested as binary ``and`` expressions::

    (and (term field=x_chef_database_chef_x 'chef_288da1c0')(term field=x_chef_type_chef_x 'node'))

The free-text query is still sent as Lucene syntax (``q.parser=lucene``).

Known limitation: the search URL carries no ``rows`` parameter, so the
page size is whatever the CloudSearch domain defaults to.  ``rows`` on the
descriptor is ignored for this backend.

Responses have the shape ``{"hits": {"found", "hit": [{"fields": {...}}]}}``
and carry no offset; the caller's own ``start`` is echoed back.
CloudSearch has no commit step.
"""

from __future__ import annotations

from typing import Any

from chef_index.models.query import Backend, IndexKind, IndexType, QueryDescriptor
from chef_index.providers.base.fields import DATA_BAG_FIELD, partition_name
from chef_index.providers.base.provider import SearchProvider, url_encode


def sq_quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def sq_term(field: str, value: str) -> str:
    return f"term field={field} {sq_quote(value)}"


def sq_and(first: str, second: str) -> str:
    return f"(and ({first})({second}))"


class CloudSearchProvider(SearchProvider):
    """Provider for Amazon CloudSearch (2013-01-01 API)."""

    search_path = "/search"
    ping_path = "/search"
    update_path = "/documents/batch"

    response_field = "hits"
    num_found_field = "found"
    docs_field = "hit"

    @property
    def backend(self) -> Backend:
        return Backend.CLOUDSEARCH

    def type_filter(self, kind: IndexKind) -> str:
        if kind.is_data_bag:
            return sq_and(
                sq_term(self.fields.type, IndexType.DATA_BAG_ITEM.value),
                sq_term(DATA_BAG_FIELD, kind.bag_name or ""),
            )
        return sq_term(self.fields.type, kind.type.value)

    def scope_to_org(self, filter_query: str, org_id: str) -> str:
        return sq_and(sq_term(self.fields.database, partition_name(org_id)), filter_query)

    def org_filter_prefix(self) -> str:
        return f"(and (term field={self.fields.database} 'chef_"

    def _render_search_url(self, query: QueryDescriptor) -> str:
        return (
            f"{self.search_path}?"
            f"fq={url_encode(query.filter_query)}"
            f"&q={url_encode(query.query_string)}"
            "&q.parser=lucene"
            f"&start={query.start}"
            f"&sort={url_encode(query.sort)}"
        )

    def unwrap_docs(self, docs: list[Any]) -> list[dict[str, Any]]:
        return [doc["fields"] for doc in docs]

    def response_offset(self, envelope: dict[str, Any], query: QueryDescriptor) -> int:
        return query.start

    def commit_payload(self) -> None:
        return None
