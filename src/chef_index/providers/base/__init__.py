"""Base provider interface — Abstract classes for search backend dialects."""

from chef_index.providers.base.provider import SearchProvider
from chef_index.providers.base.registry import ProviderRegistry

__all__ = ["ProviderRegistry", "SearchProvider"]
