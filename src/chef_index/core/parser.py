"""Query-language parser boundary.

Translating the user-facing search syntax (``name:web*``, ``attr:value``,
...) into the index's internal Lucene field layout belongs to a separate
parser.  The normalizer only needs something that turns a raw query into a
transformed one or rejects it.
"""

from __future__ import annotations

from typing import Protocol


class QueryParser(Protocol):
    """Transforms a raw query string, or returns None to reject it."""

    def parse(self, raw_query: str) -> str | None: ...


class PassthroughQueryParser:
    """Accepts every non-blank query unchanged.

    Suitable when queries are already expressed in the index's Lucene
    syntax, and as a stand-in for tests.
    """

    def parse(self, raw_query: str) -> str | None:
        if not raw_query.strip():
            return None
        return raw_query
