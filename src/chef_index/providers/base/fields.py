"""Field map — Canonical index field names per backend.

Both backends store the same three bookkeeping fields on every document,
spelled differently: Solr uses ``X_CHEF_<name>_CHEF_X`` while CloudSearch
only allows lower-case field names.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

from chef_index.exceptions import InvalidOrgIdError
from chef_index.models.query import Backend

DATA_BAG_FIELD = "data_bag"

_ORG_ID_RE = re.compile(r"[A-Za-z0-9_-]+")


class FieldMap(BaseModel):
    """Identifier, partition and type field names for one backend."""

    model_config = ConfigDict(frozen=True)

    id: str
    database: str
    type: str


SOLR_FIELDS = FieldMap(id="X_CHEF_id_CHEF_X", database="X_CHEF_database_CHEF_X", type="X_CHEF_type_CHEF_X")
CLOUDSEARCH_FIELDS = FieldMap(id="x_chef_id_chef_x", database="x_chef_database_chef_x", type="x_chef_type_chef_x")

_FIELD_MAPS: dict[Backend, FieldMap] = {
    Backend.SOLR: SOLR_FIELDS,
    Backend.CLOUDSEARCH: CLOUDSEARCH_FIELDS,
}


def field_map(backend: Backend) -> FieldMap:
    """Return the canonical field names used by ``backend``."""
    return _FIELD_MAPS[backend]


def partition_name(org_id: str) -> str:
    """Name of an organization's search partition.

    The name is embedded verbatim in Lucene queries and filters, so only
    letters, digits, ``_`` and ``-`` are accepted.

    Raises:
        InvalidOrgIdError: If ``org_id`` contains any other character.
    """
    if not _ORG_ID_RE.fullmatch(org_id):
        raise InvalidOrgIdError(org_id)
    return f"chef_{org_id}"
