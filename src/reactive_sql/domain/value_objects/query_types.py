"""Value objects describing queries, their classification and their results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence, Union

from reactive_sql.domain.value_objects.identifiers import TableName

Scalar = Union[int, float, str, bytes, None]

BindParams = Union[Mapping[str, Scalar], Sequence[Scalar]]
"""Bound parameters.

Named parameters are keyed by their placeholder token including the sigil
(``$id``, ``:age``, ``@name``); positional parameters are a plain sequence.
"""


class QueryKind(Enum):
    """Classification of a query string."""

    READ = "read"
    WRITE = "write"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class QueryMatch:
    """Result of matching a query against a classification pattern.

    Attributes:
        kind: Whether the read or the write pattern matched
        text: The matched leading part of the query
        prefix: The keyword that anchored the match ("SELECT" / "INSERT INTO")
        table: The known table name captured by the match
    """

    kind: QueryKind
    text: str
    prefix: str
    table: TableName

    def groups(self) -> tuple[str, str, str]:
        """Whole match followed by the captured groups."""
        return (self.text, self.prefix, self.table)


@dataclass(frozen=True, slots=True)
class QueryResult:
    """One result set: column names and row values.

    Only statements that produced rows contribute a result set.
    """

    columns: list[str] = field(default_factory=list)
    values: list[list[Any]] = field(default_factory=list)

    def as_dicts(self) -> list[dict[str, Any]]:
        """Rows as column-name dictionaries."""
        return [dict(zip(self.columns, row)) for row in self.values]

    def __len__(self) -> int:
        return len(self.values)
