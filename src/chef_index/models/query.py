"""Query models — Backend tags, index kinds and the normalized query descriptor."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from chef_index.exceptions import QueryError

MATCH_ALL_QUERY = "*:*"
DEFAULT_START = 0
DEFAULT_ROWS = 1000


class Backend(str, Enum):
    """Supported search backends."""

    SOLR = "solr"
    CLOUDSEARCH = "cloudsearch"


class IndexType(str, Enum):
    """Object-type families stored in the index."""

    NODE = "node"
    ROLE = "role"
    CLIENT = "client"
    ENVIRONMENT = "environment"
    DATA_BAG_ITEM = "data_bag_item"


BUILTIN_TYPES: frozenset[str] = frozenset(
    {IndexType.NODE.value, IndexType.ROLE.value, IndexType.CLIENT.value, IndexType.ENVIRONMENT.value}
)


class IndexKind(BaseModel):
    """Classification of a searched object type.

    The four built-in kinds map to themselves.  Anything else is a user
    defined data bag and carries its name in ``bag_name``.
    """

    model_config = ConfigDict(frozen=True)

    type: IndexType
    bag_name: str | None = None

    @classmethod
    def from_object_type(cls, obj_type: str) -> IndexKind:
        if obj_type in BUILTIN_TYPES:
            return cls(type=IndexType(obj_type))
        return cls(type=IndexType.DATA_BAG_ITEM, bag_name=obj_type)

    @property
    def is_data_bag(self) -> bool:
        return self.type is IndexType.DATA_BAG_ITEM


class QueryDescriptor(BaseModel):
    """A normalized, backend-specific search query.

    Built by ``normalize()`` and scoped to an organization with
    ``SearchIndex.add_org_guid_to_query()`` before it is rendered.
    """

    model_config = ConfigDict(frozen=True)

    query_string: str = Field(min_length=1, description="Transformed free-text query")
    filter_query: str = Field(description="Backend-specific filter expression")
    backend: Backend = Field(description="Backend the filter was built for")
    start: int = Field(default=DEFAULT_START, ge=0, description="Result offset")
    rows: int = Field(default=DEFAULT_ROWS, ge=0, description="Page size (ignored by CloudSearch)")
    sort: str = Field(description="Fixed sort clause on the identifier field")
    index: IndexKind = Field(description="Classification of the searched object type")


class QueryOutcome(BaseModel):
    """Result of query normalization: either a descriptor or a validation error."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    query: QueryDescriptor | None = None
    error: QueryError | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> QueryOutcome:
        if (self.query is None) == (self.error is None):
            raise ValueError("QueryOutcome needs exactly one of query or error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> QueryDescriptor:
        """Return the descriptor, raising the carried error if normalization failed."""
        if self.query is None:
            raise self.error or ValueError("QueryOutcome carries no query")
        return self.query
