"""Tests for the Apache Solr provider."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import parse_qs, urlsplit

import pytest

from chef_index.exceptions import (
    ClientQueryError,
    InternalConsistencyError,
    InvalidOrgIdError,
    ServerError,
    UnexpectedResponseError,
)
from chef_index.models.query import Backend, IndexKind, QueryDescriptor
from chef_index.providers.solr.provider import SolrProvider

ORG_ID = "288da1c090ff45c987346d2829257256"


def _query(provider: SolrProvider, filter_query: str, **kwargs: Any) -> QueryDescriptor:
    return QueryDescriptor(
        query_string=kwargs.pop("query_string", "*:*"),
        filter_query=filter_query,
        backend=Backend.SOLR,
        sort=provider.sort_clause(),
        index=IndexKind.from_object_type("node"),
        **kwargs,
    )


# ── Properties ───────────────────────────────────────────────────────────────


class TestSolrProperties:
    def test_backend(self, solr: SolrProvider) -> None:
        assert solr.backend is Backend.SOLR

    def test_fields(self, solr: SolrProvider) -> None:
        assert solr.fields.id == "X_CHEF_id_CHEF_X"
        assert solr.fields.database == "X_CHEF_database_CHEF_X"
        assert solr.fields.type == "X_CHEF_type_CHEF_X"

    def test_paths(self, solr: SolrProvider) -> None:
        assert solr.search_path == "/select"
        assert solr.ping_path == "/admin/ping?wt=json"
        assert solr.update_path == "/update"

    def test_sort_clause(self, solr: SolrProvider) -> None:
        assert solr.sort_clause() == "X_CHEF_id_CHEF_X asc"


# ── Filters ──────────────────────────────────────────────────────────────────


class TestSolrFilters:
    @pytest.mark.parametrize("obj_type", ["node", "role", "client", "environment"])
    def test_builtin_type_filter(self, solr: SolrProvider, obj_type: str) -> None:
        kind = IndexKind.from_object_type(obj_type)
        assert solr.type_filter(kind) == f"+X_CHEF_type_CHEF_X:{obj_type}"

    def test_data_bag_type_filter(self, solr: SolrProvider) -> None:
        kind = IndexKind.from_object_type("users")
        assert solr.type_filter(kind) == "+X_CHEF_type_CHEF_X:data_bag_item +data_bag:users"

    def test_scope_to_org_puts_partition_first(self, solr: SolrProvider) -> None:
        fq = solr.scope_to_org("+X_CHEF_type_CHEF_X:node", ORG_ID)
        assert fq == f"+X_CHEF_database_CHEF_X:chef_{ORG_ID} +X_CHEF_type_CHEF_X:node"
        assert fq.startswith(solr.org_filter_prefix())

    def test_assert_org_filter_rejects_unscoped(self, solr: SolrProvider) -> None:
        with pytest.raises(InternalConsistencyError):
            solr.assert_org_filter("+X_CHEF_type_CHEF_X:node")


# ── URL rendering ────────────────────────────────────────────────────────────


class TestSolrSearchUrl:
    def test_url_layout(self, solr: SolrProvider) -> None:
        fq = solr.scope_to_org("+X_CHEF_type_CHEF_X:node", ORG_ID)
        url = solr.search_url(_query(solr, fq, query_string="name:web*", start=10, rows=20))
        assert url == (
            "/select?"
            f"fq=%2BX_CHEF_database_CHEF_X%3Achef_{ORG_ID}+%2BX_CHEF_type_CHEF_X%3Anode"
            "&indent=off"
            "&q=name%3Aweb%2A"
            "&start=10"
            "&rows=20"
            "&wt=json"
            "&sort=X_CHEF_id_CHEF_X+asc"
        )

    def test_url_round_trips_dynamic_segments(self, solr: SolrProvider) -> None:
        fq = solr.scope_to_org("+X_CHEF_type_CHEF_X:data_bag_item +data_bag:my&bag", ORG_ID)
        url = solr.search_url(_query(solr, fq, query_string="a:b AND c:\"d e\""))
        params = parse_qs(urlsplit(url).query)
        assert params["fq"] == [fq]
        assert params["q"] == ['a:b AND c:"d e"']
        assert params["sort"] == ["X_CHEF_id_CHEF_X asc"]
        assert params["rows"] == ["1000"]

    def test_unscoped_query_is_fatal(self, solr: SolrProvider) -> None:
        with pytest.raises(InternalConsistencyError):
            solr.search_url(_query(solr, "+X_CHEF_type_CHEF_X:node"))

    def test_query_for_other_backend_is_fatal(self, solr: SolrProvider) -> None:
        query = _query(solr, f"+X_CHEF_database_CHEF_X:chef_{ORG_ID} +X_CHEF_type_CHEF_X:node")
        query = query.model_copy(update={"backend": Backend.CLOUDSEARCH})
        with pytest.raises(InternalConsistencyError):
            solr.search_url(query)


# ── Response parsing ─────────────────────────────────────────────────────────


class TestSolrParseResponse:
    @pytest.fixture
    def query(self, solr: SolrProvider) -> QueryDescriptor:
        return _query(solr, f"+X_CHEF_database_CHEF_X:chef_{ORG_ID} +X_CHEF_type_CHEF_X:node", start=5)

    def test_parse_ok(self, solr: SolrProvider, query: QueryDescriptor, solr_response: dict) -> None:
        result = solr.parse_response(200, json.dumps(solr_response), url="/select?x", query=query)
        assert result.offset == 0
        assert result.total_matches == 2
        assert result.ids == ["a", "b"]

    def test_offset_comes_from_payload(self, solr: SolrProvider, query: QueryDescriptor) -> None:
        body = {"response": {"start": 40, "numFound": 41, "docs": [{"X_CHEF_id_CHEF_X": "z"}]}}
        result = solr.parse_response(200, json.dumps(body).encode(), url="/select?x", query=query)
        assert result.offset == 40
        assert result.ids == ["z"]

    def test_400_is_client_error(self, solr: SolrProvider, query: QueryDescriptor) -> None:
        with pytest.raises(ClientQueryError) as exc_info:
            solr.parse_response(400, b"", url="/select?fq=secret", query=query)
        assert exc_info.value.url == "/select?fq=secret"
        assert "secret" not in str(exc_info.value)

    def test_500_is_server_error(self, solr: SolrProvider, query: QueryDescriptor) -> None:
        with pytest.raises(ServerError) as exc_info:
            solr.parse_response(500, b"", url="/select?fq=secret", query=query)
        assert exc_info.value.status_code == 500
        assert "secret" not in str(exc_info.value)

    def test_other_status_is_unexpected(self, solr: SolrProvider, query: QueryDescriptor) -> None:
        with pytest.raises(UnexpectedResponseError) as exc_info:
            solr.parse_response(503, b"", url="/select?x", query=query)
        assert exc_info.value.status_code == 503

    @pytest.mark.parametrize(
        "body",
        [
            b"not json",
            b"[]",
            b'{"hits": {}}',
            b'{"response": {"start": 0, "docs": []}}',
            b'{"response": {"start": 0, "numFound": 1, "docs": [{"other": "x"}]}}',
        ],
    )
    def test_malformed_body_is_unexpected(self, solr: SolrProvider, query: QueryDescriptor, body: bytes) -> None:
        with pytest.raises(UnexpectedResponseError):
            solr.parse_response(200, body, url="/select?x", query=query)


# ── Maintenance payloads ─────────────────────────────────────────────────────


class TestSolrMaintenancePayloads:
    def test_delete_partition_payload(self, solr: SolrProvider) -> None:
        assert solr.delete_payload(ORG_ID) == (
            "<?xml version='1.0' encoding='UTF-8'?><delete><query>"
            f"X_CHEF_database_CHEF_X:chef_{ORG_ID}"
            "</query></delete>"
        )

    def test_delete_by_type_payload(self, solr: SolrProvider) -> None:
        payload = solr.delete_payload(ORG_ID, "data_bag_item")
        assert f"X_CHEF_database_CHEF_X:chef_{ORG_ID} AND X_CHEF_type_CHEF_X:data_bag_item" in payload

    def test_commit_payload(self, solr: SolrProvider) -> None:
        assert solr.commit_payload() == "<?xml version='1.0' encoding='UTF-8'?><commit/>"

    def test_delete_payload_refuses_query_syntax_in_org_id(self, solr: SolrProvider) -> None:
        with pytest.raises(InvalidOrgIdError):
            solr.delete_payload("x OR *:*")
        with pytest.raises(InvalidOrgIdError):
            solr.delete_payload("x OR *:*", "node")

    def test_scope_to_org_refuses_query_syntax_in_org_id(self, solr: SolrProvider) -> None:
        with pytest.raises(InvalidOrgIdError):
            solr.scope_to_org("+X_CHEF_type_CHEF_X:node", "x +X_CHEF_database_CHEF_X:*")
