"""Shared test fixtures and configuration."""

from __future__ import annotations

import json
from typing import Any

import pytest

from chef_index.config.settings import Settings
from chef_index.core.index import SearchIndex
from chef_index.core.transport import HttpResponse
from chef_index.exceptions import TransportError
from chef_index.models.query import Backend
from chef_index.providers.cloudsearch.provider import CloudSearchProvider
from chef_index.providers.solr.provider import SolrProvider


class FakeTransport:
    """Records requests and replays queued responses (or raises queued errors)."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self._responses: list[HttpResponse | Exception] = []

    def queue(self, status_code: int = 200, body: Any = b"") -> None:
        if not isinstance(body, (bytes, str)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode()
        self._responses.append(HttpResponse(status_code=status_code, body=body))

    def queue_error(self, error: Exception) -> None:
        self._responses.append(error)

    def request(
        self,
        url: str,
        method: str,
        body: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        self.calls.append({"url": url, "method": method, "body": body, "headers": headers})
        if not self._responses:
            raise TransportError("no response queued")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def cloudsearch_settings() -> Settings:
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        index={"provider": Backend.CLOUDSEARCH, "url": "https://search-chef.example.com/2013-01-01"},
    )


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def solr_index(settings: Settings, transport: FakeTransport) -> SearchIndex:
    return SearchIndex(settings, transport=transport)


@pytest.fixture
def cloudsearch_index(cloudsearch_settings: Settings, transport: FakeTransport) -> SearchIndex:
    return SearchIndex(cloudsearch_settings, transport=transport)


@pytest.fixture
def solr() -> SolrProvider:
    return SolrProvider()


@pytest.fixture
def cloudsearch() -> CloudSearchProvider:
    return CloudSearchProvider()


@pytest.fixture
def solr_response() -> dict[str, Any]:
    """Sample Solr JSON response from /select."""
    return {
        "responseHeader": {"status": 0, "QTime": 3},
        "response": {
            "start": 0,
            "numFound": 2,
            "docs": [{"X_CHEF_id_CHEF_X": "a"}, {"X_CHEF_id_CHEF_X": "b"}],
        },
    }


@pytest.fixture
def cloudsearch_response() -> dict[str, Any]:
    """Sample CloudSearch JSON response from /search."""
    return {
        "status": {"rid": "abc", "time-ms": 2},
        "hits": {
            "found": 1,
            "start": 0,
            "hit": [{"id": "doc-1", "fields": {"x_chef_id_chef_x": "x"}}],
        },
    }
