from chef_index.providers.cloudsearch.provider import CloudSearchProvider

__all__ = ["CloudSearchProvider"]
