"""Apache Solr provider — Lucene filter syntax over Solr's ``/select`` handler.

Filters are mandatory (``+``-prefixed) Lucene clauses joined by spaces, e.g.::

    +X_CHEF_database_CHEF_X:chef_288da1c0 +X_CHEF_type_CHEF_X:node

Responses have the shape ``{"response": {"start", "numFound", "docs": [...]}}``.
"""

from __future__ import annotations

from typing import Any

from chef_index.models.query import Backend, IndexKind, IndexType, QueryDescriptor
from chef_index.providers.base.fields import DATA_BAG_FIELD, partition_name
from chef_index.providers.base.provider import XML_PROLOG, SearchProvider, url_encode


class SolrProvider(SearchProvider):
    """Provider for Apache Solr."""

    search_path = "/select"
    ping_path = "/admin/ping?wt=json"
    update_path = "/update"

    response_field = "response"
    num_found_field = "numFound"
    docs_field = "docs"

    @property
    def backend(self) -> Backend:
        return Backend.SOLR

    def type_filter(self, kind: IndexKind) -> str:
        if kind.is_data_bag:
            return f"+{self.fields.type}:{IndexType.DATA_BAG_ITEM.value} +{DATA_BAG_FIELD}:{kind.bag_name}"
        return f"+{self.fields.type}:{kind.type.value}"

    def scope_to_org(self, filter_query: str, org_id: str) -> str:
        return f"+{self.fields.database}:{partition_name(org_id)} {filter_query}"

    def org_filter_prefix(self) -> str:
        return f"+{self.fields.database}:chef_"

    def _render_search_url(self, query: QueryDescriptor) -> str:
        return (
            f"{self.search_path}?"
            f"fq={url_encode(query.filter_query)}"
            "&indent=off"
            f"&q={url_encode(query.query_string)}"
            f"&start={query.start}"
            f"&rows={query.rows}"
            "&wt=json"
            f"&sort={url_encode(query.sort)}"
        )

    def response_offset(self, envelope: dict[str, Any], query: QueryDescriptor) -> int:
        return envelope["start"]

    def commit_payload(self) -> str:
        return f"{XML_PROLOG}<commit/>"
