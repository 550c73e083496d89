"""SearchIndex — Search and maintenance facade over the active search backend.

The active backend is read from settings once at the start of every
operation and threaded through it, so a configuration change never splits
one operation across two backends.

Search path::

    outcome = index.make_query("node", "name:web*", start="0", rows="20")
    query = index.add_org_guid_to_query(outcome.unwrap(), org_id)
    result = index.search(query)

Maintenance path::

    index.delete_search_db(org_id)
    index.delete_search_db_by_type(org_id, "node")
    index.commit()
    index.ping()
"""

from __future__ import annotations

import logging
import time

from chef_index.config.settings import Settings
from chef_index.core.normalizer import normalize
from chef_index.core.parser import PassthroughQueryParser, QueryParser
from chef_index.core.transport import HttpxTransport, IndexTransport
from chef_index.exceptions import BackendError, UnsupportedTypeError
from chef_index.models.query import Backend, IndexType, QueryDescriptor, QueryOutcome
from chef_index.models.result import MaintenanceResult, PingStatus, SearchResult
from chef_index.providers.base.provider import SearchProvider
from chef_index.providers.base.registry import ProviderRegistry, default_registry

logger = logging.getLogger(__name__)

DELETABLE_TYPES: frozenset[str] = frozenset(t.value for t in IndexType)


class SearchIndex:
    """Entry point for querying and maintaining a Chef search index.

    Args:
        settings: Settings holding the active provider and backend URL.
        transport: HTTP transport; defaults to an ``HttpxTransport`` bound to
            ``settings.index``.
        parser: Query-language parser used by ``make_query``.
        registry: Provider registry; defaults to the built-in providers.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: IndexTransport | None = None,
        parser: QueryParser | None = None,
        registry: ProviderRegistry | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.transport = transport or HttpxTransport(self.settings.index)
        self.parser = parser or PassthroughQueryParser()
        self.registry = registry or default_registry()

    def current_backend(self) -> Backend:
        """The configured search provider, read fresh from settings."""
        return self.settings.index.provider

    def provider(self, backend: Backend | None = None) -> SearchProvider:
        return self.registry.get(backend or self.current_backend())

    # ── Search ───────────────────────────────────────────────────────────

    def make_query(
        self,
        obj_type: str,
        query_string: str | None,
        start: str | None = None,
        rows: str | None = None,
    ) -> QueryOutcome:
        """Normalize raw request parameters into an unscoped query descriptor."""
        return normalize(self.provider(), obj_type, query_string, start, rows, parser=self.parser)

    def add_org_guid_to_query(self, query: QueryDescriptor, org_id: str) -> QueryDescriptor:
        """Scope ``query`` to one organization's partition.

        Raises:
            InvalidOrgIdError: If ``org_id`` cannot name a partition.
        """
        provider = self.provider(query.backend)
        return query.model_copy(update={"filter_query": provider.scope_to_org(query.filter_query, org_id)})

    def build_url(self, query: QueryDescriptor) -> str:
        """Render ``query`` into a request path for its backend."""
        return self.provider(query.backend).search_url(query)

    def search(self, query: QueryDescriptor) -> SearchResult:
        """Run ``query`` and normalize the backend's response.

        Raises:
            ClientQueryError: The backend rejected the query (HTTP 400).
            ServerError: The backend failed (HTTP 500).
            UnexpectedResponseError: Any other status or an unreadable body.
            TransportError: The backend could not be reached.
            InternalConsistencyError: ``query`` is not scoped to an organization.
        """
        provider = self.provider(query.backend)
        url = provider.search_url(query)
        resp = self.transport.request(url, "get")
        try:
            result = provider.parse_response(resp.status_code, resp.body, url=url, query=query)
        except BackendError as e:
            # The URL reveals the filter structure: logs only, never callers.
            logger.warning("Search backend error (HTTP %s) for %s: %s", e.status_code, e.url, e)
            raise
        logger.debug(
            "Search on %s returned %d of %d matches", provider.backend.value, len(result.ids), result.total_matches
        )
        return result

    # ── Maintenance ──────────────────────────────────────────────────────

    def delete_search_db(self, org_id: str) -> MaintenanceResult:
        """Delete every document in an organization's partition, then commit.

        Transport faults and non-200 answers come back as a failed result.

        Raises:
            InvalidOrgIdError: If ``org_id`` cannot name a partition.
        """
        provider = self.provider()
        result = self._update(provider, provider.delete_payload(org_id), "delete_search_db")
        if not result.ok:
            return result
        commit = self._commit(provider)
        if not commit.ok:
            return commit.model_copy(update={"operation": "delete_search_db"})
        logger.info("Deleted search partition for org %s", org_id)
        return result

    def delete_search_db_by_type(self, org_id: str, type_name: str | IndexType) -> MaintenanceResult:
        """Delete one object type from an organization's partition.

        Does not commit; committing is expensive at scale, so callers batch
        deletes and call ``commit()`` themselves.

        Raises:
            UnsupportedTypeError: If ``type_name`` is not a known index type.
            InvalidOrgIdError: If ``org_id`` cannot name a partition.
        """
        name = type_name.value if isinstance(type_name, IndexType) else type_name
        if name not in DELETABLE_TYPES:
            raise UnsupportedTypeError(name)
        provider = self.provider()
        return self._update(provider, provider.delete_payload(org_id, name), "delete_search_db_by_type")

    def commit(self) -> MaintenanceResult:
        """Commit pending index changes.  A no-op on backends without commits."""
        return self._commit(self.provider())

    def ping(self) -> PingStatus:
        """Check whether the search backend is up.  Never raises."""
        try:
            provider = self.provider()
            started = time.monotonic()
            resp = self.transport.request(provider.ping_path, "get")
            latency_ms = int((time.monotonic() - started) * 1000)
        except Exception:
            logger.warning("Search backend ping failed", exc_info=True)
            return PingStatus.DOWN
        if resp.status_code == 200:
            logger.debug("Search backend ping OK in %d ms", latency_ms)
            return PingStatus.UP
        logger.warning("Search backend ping returned HTTP %s", resp.status_code)
        return PingStatus.DOWN

    def update_url(self) -> str:
        """Path of the active backend's update endpoint."""
        return self.provider().update_path

    # ── Helpers ──────────────────────────────────────────────────────────

    def _commit(self, provider: SearchProvider) -> MaintenanceResult:
        payload = provider.commit_payload()
        if payload is None:
            logger.info("Commit not supported when using %s as a search provider", provider.backend.value)
            return MaintenanceResult(ok=True, operation="commit")
        return self._update(provider, payload, "commit")

    def _update(self, provider: SearchProvider, body: str, operation: str) -> MaintenanceResult:
        try:
            resp = self.transport.request(
                provider.update_path,
                "post",
                body,
                headers={"Content-Type": provider.update_content_type},
            )
        except Exception as e:
            logger.error("Index %s failed: %s", operation, e, exc_info=True)
            return MaintenanceResult(ok=False, operation=operation, error=str(e))
        if resp.status_code != 200:
            logger.error("Index %s returned HTTP %s", operation, resp.status_code)
            return MaintenanceResult(
                ok=False,
                operation=operation,
                status_code=resp.status_code,
                error=f"HTTP {resp.status_code}",
            )
        return MaintenanceResult(ok=True, operation=operation)
