"""Lexical query classifier.

Queries are routed by pattern matching, not by parsing SQL. A query is a
read when it starts with ``SELECT`` and later mentions one of the known
tables; it is a write when it starts with ``INSERT INTO`` followed by one of
the known tables. Anything else (UPDATE, DELETE, DDL) is neither and never
drives notification.

Table capture:
    Writes capture the table named directly after ``INSERT INTO``; the name
    must end at a non-word character, so ``test`` does not match ``tests``.
    Reads match the table alternation after a greedy ``.+``, so when a
    SELECT mentions several known tables the one appearing last in the text
    is captured, and names are matched as substrings.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable

from reactive_sql.domain.value_objects import QueryKind, QueryMatch, TableName

READ_PREFIX = "SELECT"
WRITE_PREFIX = "INSERT INTO"


@lru_cache(maxsize=128)
def _compile(prefix: str, tables: tuple[str, ...]) -> re.Pattern[str]:
    alternation = "|".join(re.escape(table) for table in tables)
    if prefix == WRITE_PREFIX:
        return re.compile(rf"^\s*({re.escape(prefix)})\s+(?P<table>{alternation})(?!\w)")
    return re.compile(rf"^\s*({re.escape(prefix)}).+(?P<table>{alternation})", re.DOTALL)


def _match(
    kind: QueryKind, prefix: str, query: str, tables: Iterable[str]
) -> QueryMatch | None:
    known = tuple(t for t in tables if t)
    if not known:
        return None

    found = _compile(prefix, known).match(query)
    if found is None:
        return None

    return QueryMatch(
        kind=kind,
        text=found.group(0).lstrip(),
        prefix=found.group(1),
        table=TableName(found.group("table")),
    )


def reading_query_match(query: str, tables: Iterable[str]) -> QueryMatch | None:
    """Match ``query`` against the read pattern.

    Args:
        query: Full query text
        tables: Known table names, in declaration order

    Returns:
        The match, or None if the query is not a read of a known table
    """
    return _match(QueryKind.READ, READ_PREFIX, query, tables)


def writing_query_match(query: str, tables: Iterable[str]) -> QueryMatch | None:
    """Match ``query`` against the write pattern.

    Args:
        query: Full query text
        tables: Known table names, in declaration order

    Returns:
        The match, or None if the query is not an insert into a known table
    """
    return _match(QueryKind.WRITE, WRITE_PREFIX, query, tables)


def table_from_read_query(query: str, tables: Iterable[str]) -> TableName | None:
    """Table read by ``query``, if any."""
    match = reading_query_match(query, tables)
    return match.table if match else None


def table_from_writing_query(query: str, tables: Iterable[str]) -> TableName | None:
    """Table written by ``query``, if any."""
    match = writing_query_match(query, tables)
    return match.table if match else None


def classify(query: str, tables: Iterable[str]) -> QueryKind:
    """Coarse classification used for metrics and tracing."""
    known = tuple(tables)
    if reading_query_match(query, known):
        return QueryKind.READ
    if writing_query_match(query, known):
        return QueryKind.WRITE
    return QueryKind.OTHER
