"""Search providers — One implementation per supported search backend.

Built-in providers:
  - solr: Apache Solr (Lucene query and filter syntax)
  - cloudsearch: Amazon CloudSearch (structured query language)

Implement ``SearchProvider`` and register it with a ``ProviderRegistry``
to support another backend.
"""

from chef_index.providers.cloudsearch.provider import CloudSearchProvider
from chef_index.providers.solr.provider import SolrProvider

__all__ = ["CloudSearchProvider", "SolrProvider"]
