"""Query normalizer — Validates request parameters and builds a ``QueryDescriptor``.

Validation failures are returned inside a ``QueryOutcome`` rather than
raised, so callers can inspect and report them.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import unquote

from chef_index.core.parser import PassthroughQueryParser, QueryParser
from chef_index.exceptions import EmptyQueryError, InvalidParameterError, MalformedQueryError, QueryError
from chef_index.models.query import (
    DEFAULT_ROWS,
    DEFAULT_START,
    MATCH_ALL_QUERY,
    IndexKind,
    QueryDescriptor,
    QueryOutcome,
)
from chef_index.providers.base.provider import SearchProvider

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def normalize(
    provider: SearchProvider,
    obj_type: str,
    query_string: str | None,
    start: str | None = None,
    rows: str | None = None,
    *,
    parser: QueryParser | None = None,
) -> QueryOutcome:
    """Build an unscoped query descriptor from raw request parameters.

    Args:
        provider: Provider for the active backend; fixes the filter dialect.
        obj_type: Object type being searched (``node``, ``role``, ... or a data bag name).
        query_string: Raw, possibly percent-encoded ``q`` parameter.  None means
            "match everything".
        start: Raw ``start`` parameter, or None for the default.
        rows: Raw ``rows`` parameter, or None for the default.
        parser: Query-language parser; defaults to pass-through.

    Returns:
        A ``QueryOutcome`` carrying either the descriptor or the validation error.
    """
    try:
        transformed = check_query(query_string, parser or PassthroughQueryParser())
        start_value = decode_non_neg_int("start", start, DEFAULT_START)
        rows_value = decode_non_neg_int("rows", rows, DEFAULT_ROWS)
    except QueryError as e:
        logger.debug("Rejected search request for %s: %s", obj_type, e)
        return QueryOutcome(error=e)

    kind = IndexKind.from_object_type(obj_type)
    return QueryOutcome(
        query=QueryDescriptor(
            query_string=transformed,
            filter_query=provider.type_filter(kind),
            backend=provider.backend,
            start=start_value,
            rows=rows_value,
            sort=provider.sort_clause(),
            index=kind,
        )
    )


def check_query(raw_query: str | None, parser: QueryParser) -> str:
    if raw_query is None:
        # No 'q' parameter at all searches everything.
        return MATCH_ALL_QUERY
    if raw_query == "":
        raise EmptyQueryError()
    decoded = unquote(raw_query)
    transformed = parser.parse(decoded)
    if not transformed:
        raise MalformedQueryError(decoded)
    return transformed


def decode_non_neg_int(key: str, value: str | None, default: int) -> int:
    """Parse a percent-encoded, non-negative decimal parameter."""
    if value is None:
        return default
    decoded = unquote(value)
    if not _INTEGER_RE.fullmatch(decoded):
        raise InvalidParameterError(key, value)
    number = int(decoded)
    if number < 0:
        raise InvalidParameterError(key, value)
    return number
