"""Unit tests for schema compilation."""

from __future__ import annotations

import pytest

from reactive_sql.domain.services import TableSchema, create_query_from_schema, parse_schema
from reactive_sql.domain.services.schema_compiler import format_literal
from reactive_sql.domain.value_objects import SchemaError

FIELDS = {"id": "INTEGER", "age": "INTEGER", "name": "TEXT"}


@pytest.mark.unit
class TestCreateQueryFromSchema:
    """Tests for create_query_from_schema."""

    def test_create_table_only(self) -> None:
        """Test a table without values compiles to a single CREATE TABLE."""
        query, tables = create_query_from_schema({"test": {"fields": FIELDS}})

        assert query == "CREATE TABLE test (id INTEGER, age INTEGER, name TEXT);"
        assert tables == ["test"]

    def test_create_table_and_inserts(self) -> None:
        """Test seed rows follow their CREATE TABLE with no separators."""
        schema = {
            "test": {
                "fields": FIELDS,
                "values": [
                    {"id": 1, "age": 10, "name": "Ling"},
                    {"id": 2, "age": 18, "name": "Paul"},
                ],
            }
        }

        query, _ = create_query_from_schema(schema)

        assert query == (
            "CREATE TABLE test (id INTEGER, age INTEGER, name TEXT);"
            "INSERT INTO test VALUES (1, 10, 'Ling');"
            "INSERT INTO test VALUES (2, 18, 'Paul');"
        )

    def test_multiple_tables_keep_declaration_order(self) -> None:
        """Test tables compile in declaration order."""
        schema = {
            "users": {"fields": {"id": "INTEGER"}},
            "posts": {"fields": {"id": "INTEGER", "title": "TEXT"}, "values": [{"id": 1, "title": "Hi"}]},
        }

        query, tables = create_query_from_schema(schema)

        assert tables == ["users", "posts"]
        assert query == (
            "CREATE TABLE users (id INTEGER);"
            "CREATE TABLE posts (id INTEGER, title TEXT);"
            "INSERT INTO posts VALUES (1, 'Hi');"
        )

    def test_embedded_quote_is_escaped(self) -> None:
        """Test a seed string containing a quote stays one literal."""
        schema = {"test": {"fields": FIELDS, "values": [{"id": 1, "age": 30, "name": "O'Brien"}]}}

        query, _ = create_query_from_schema(schema)

        assert query.endswith("INSERT INTO test VALUES (1, 30, 'O''Brien');")

    def test_empty_schema(self) -> None:
        """Test an empty schema compiles to an empty script."""
        assert create_query_from_schema({}) == ("", [])

    def test_accepts_table_schema_models(self) -> None:
        """Test already validated TableSchema models are accepted."""
        query, _ = create_query_from_schema({"t": TableSchema(fields={"x": "REAL"})})

        assert query == "CREATE TABLE t (x REAL);"

    def test_missing_fields_is_rejected(self) -> None:
        """Test a table without fields raises SchemaError."""
        with pytest.raises(SchemaError):
            create_query_from_schema({"test": {"values": []}})

    def test_parse_schema_validates_each_table(self) -> None:
        """Test parse_schema returns one model per table."""
        parsed = parse_schema({"test": {"fields": FIELDS}})

        assert parsed["test"].fields == FIELDS
        assert parsed["test"].values is None


@pytest.mark.unit
class TestFormatLiteral:
    """Tests for format_literal."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Ling", "'Ling'"),
            ("O'Brien", "'O''Brien'"),
            (10, "10"),
            (1.5, "1.5"),
            (None, "NULL"),
            (True, "1"),
            (False, "0"),
            (b"\x01\xff", "X'01ff'"),
        ],
    )
    def test_literals(self, value: object, expected: str) -> None:
        """Test each scalar type renders as its SQL literal."""
        assert format_literal(value) == expected  # type: ignore[arg-type]
