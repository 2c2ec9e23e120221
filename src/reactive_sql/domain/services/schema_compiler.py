"""Compile a declarative schema into a bootstrap SQL script.

A schema maps table names to their column definitions and optional seed
rows::

    {
        "test": {
            "fields": {"id": "INTEGER", "age": "INTEGER", "name": "TEXT"},
            "values": [{"id": 1, "age": 10, "name": "Ling"}],
        }
    }

compiles to::

    CREATE TABLE test (id INTEGER, age INTEGER, name TEXT);INSERT INTO test VALUES (1, 10, 'Ling');

Statements are concatenated with nothing but their trailing semicolons.
Row values are emitted in the row's own key order.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError

from reactive_sql.domain.value_objects import Scalar, SchemaError

CREATE_TABLE = "CREATE TABLE"


class TableSchema(BaseModel):
    """Column definitions and seed rows for one table."""

    fields: dict[str, str] = Field(description="Column name to SQL type keyword")
    values: list[dict[str, Scalar]] | None = Field(
        default=None, description="Seed rows inserted after the table is created"
    )


Schema = Mapping[str, "TableSchema | Mapping[str, Any]"]


def parse_schema(schema: Schema) -> dict[str, TableSchema]:
    """Validate a schema mapping.

    Raises:
        SchemaError: If a table definition is malformed
    """
    parsed: dict[str, TableSchema] = {}
    for table, definition in schema.items():
        if isinstance(definition, TableSchema):
            parsed[table] = definition
            continue
        try:
            parsed[table] = TableSchema.model_validate(definition)
        except ValidationError as e:
            raise SchemaError(f"Invalid definition for table '{table}': {e}") from e
    return parsed


def format_literal(value: Scalar) -> str:
    """Render a seed value as a SQL literal.

    Strings are single-quoted with embedded quotes doubled; everything else
    uses its literal form.
    """
    if isinstance(value, str):
        escaped = value.replace("'", "''")
        return f"'{escaped}'"
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, bytes):
        return f"X'{value.hex()}'"
    return str(value)


def create_query_from_schema(schema: Schema) -> tuple[str, list[str]]:
    """Build the bootstrap script for ``schema``.

    Args:
        schema: Table name to table definition

    Returns:
        The script, and the table names in declaration order

    Raises:
        SchemaError: If a table definition is malformed
    """
    tables = parse_schema(schema)
    query = ""

    for table, definition in tables.items():
        fields_part = ", ".join(f"{name} {kind}" for name, kind in definition.fields.items())
        insert_part = "".join(
            f"INSERT INTO {table} VALUES ({', '.join(format_literal(v) for v in row.values())});"
            for row in definition.values or []
        )
        query += f"{CREATE_TABLE} {table} ({fields_part});{insert_part}"

    return query, list(tables)
