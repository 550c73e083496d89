"""Provider Registry — Maps backend tags to search provider instances.

Providers are stateless, so the registry creates each one lazily on first
lookup and hands out the same instance afterwards.
"""

from __future__ import annotations

import logging

from chef_index.models.query import Backend
from chef_index.providers.base.provider import SearchProvider

logger = logging.getLogger(__name__)


class ProviderNotFoundError(Exception):
    """Raised when no provider is registered for a backend."""


class ProviderRegistry:
    """Registry of search provider classes keyed by ``Backend``.

    Example:
        >>> registry = ProviderRegistry()
        >>> registry.register(Backend.SOLR, SolrProvider)
        >>> provider = registry.get(Backend.SOLR)
    """

    def __init__(self) -> None:
        self._classes: dict[Backend, type[SearchProvider]] = {}
        self._instances: dict[Backend, SearchProvider] = {}

    def register(self, backend: Backend, provider_class: type[SearchProvider]) -> None:
        """Register a provider class.

        Args:
            backend: Backend tag the provider speaks for.
            provider_class: The provider class to register.
        """
        if backend in self._classes:
            logger.warning("Overwriting existing provider registration: %s", backend.value)
            self._instances.pop(backend, None)
        self._classes[backend] = provider_class
        logger.debug("Registered search provider: %s", backend.value)

    def get(self, backend: Backend) -> SearchProvider:
        """Get the provider for ``backend``.

        Raises:
            ProviderNotFoundError: If no provider is registered for it.
        """
        if backend not in self._instances:
            if backend not in self._classes:
                raise ProviderNotFoundError(
                    f"No provider registered for backend '{backend.value}'. "
                    f"Available providers: {[b.value for b in self._classes]}"
                )
            self._instances[backend] = self._classes[backend]()
        return self._instances[backend]

    @property
    def registered_providers(self) -> list[Backend]:
        """List all registered backends."""
        return list(self._classes.keys())


def default_registry() -> ProviderRegistry:
    """Registry with the built-in Solr and CloudSearch providers."""
    from chef_index.providers.cloudsearch.provider import CloudSearchProvider
    from chef_index.providers.solr.provider import SolrProvider

    registry = ProviderRegistry()
    registry.register(Backend.SOLR, SolrProvider)
    registry.register(Backend.CLOUDSEARCH, CloudSearchProvider)
    return registry
