"""chef-index — Provider-abstracted search query translation for Chef indexes.

Turns application-level search requests into wire-level requests against
either Apache Solr or Amazon CloudSearch, and normalizes both backends'
responses into a single ``SearchResult`` shape.
"""

from chef_index.core.index import SearchIndex
from chef_index.models.query import Backend, IndexKind, QueryDescriptor, QueryOutcome
from chef_index.models.result import MaintenanceResult, PingStatus, SearchResult

__version__ = "0.1.0"

__all__ = [
    "Backend",
    "IndexKind",
    "MaintenanceResult",
    "PingStatus",
    "QueryDescriptor",
    "QueryOutcome",
    "SearchIndex",
    "SearchResult",
    "__version__",
]
