from chef_index.providers.solr.provider import SolrProvider

__all__ = ["SolrProvider"]
