"""Tests for DDL generation."""

import pytest

from ddl.generator import generate_sql
from ddl.parser import parse_ddl
from diagram.types import Column, Table


@pytest.fixture(name="users_table")
def create_users_table() -> Table:
    """A table with a commented primary key and a table comment."""
    return Table(
        id="node-users",
        label="users",
        comment="Registered users",
        columns=[
            Column(id="users-id", name="id", type="INT", is_pk=True, comment="User ID"),
            Column(id="users-name", name="name", type="VARCHAR(50)"),
        ],
    )


def test_generate_statement(users_table: Table) -> None:
    """Columns in order, primary key clause and table comment."""
    assert generate_sql([users_table]) == (
        "CREATE TABLE `users` (\n"
        "  `id` INT COMMENT 'User ID',\n"
        "  `name` VARCHAR(50),\n"
        "  PRIMARY KEY (`id`)\n"
        ") COMMENT='Registered users';\n"
        "\n"
    )


def test_generate_without_keys_or_comment() -> None:
    """No primary key clause and no table comment when there are none."""
    table = Table(
        id="node-log",
        label="log",
        columns=[Column(id="log-line", name="line", type="TEXT")],
    )

    assert generate_sql([table]) == "CREATE TABLE `log` (\n  `line` TEXT\n);\n\n"


def test_generate_nothing() -> None:
    """No tables, no text."""
    assert generate_sql([]) == ""


def test_generate_escapes_quotes() -> None:
    """Single quotes in comments are escaped and survive a re-parse."""
    table = Table(
        id="node-t",
        label="t",
        comment="Bob's table",
        columns=[Column(id="t-a", name="a", type="INT", comment="it's a")],
    )

    sql = generate_sql([table])
    assert "COMMENT 'it\\'s a'" in sql

    [parsed] = parse_ddl(sql).tables
    assert parsed.comment == "Bob's table"
    assert parsed.columns[0].comment == "it's a"


def test_generate_escapes_backslashes() -> None:
    """Comments ending in or holding backslashes survive a re-parse."""
    tables = [
        Table(
            id="node-paths",
            label="paths",
            comment="C:\\dir\\",
            columns=[Column(id="paths-a", name="a", type="INT", comment="a\\'b")],
        ),
        Table(
            id="node-next",
            label="next",
            columns=[Column(id="next-b", name="b", type="INT")],
        ),
    ]

    sql = generate_sql(tables)
    assert "COMMENT='C:\\\\dir\\\\';" in sql

    graph = parse_ddl(sql)
    assert [table.label for table in graph.tables] == ["paths", "next"]
    assert graph.tables[0].comment == "C:\\dir\\"
    assert graph.tables[0].columns[0].comment == "a\\'b"


def test_round_trip_keeps_columns_but_not_relationships() -> None:
    """Names, types and primary keys survive; foreign keys are never emitted."""
    original = parse_ddl(
        "CREATE TABLE authors (id INT PRIMARY KEY, name VARCHAR(100));"
        "CREATE TABLE books (isbn CHAR(13) PRIMARY KEY, writer INT,"
        " FOREIGN KEY (writer) REFERENCES authors (id));",
    )
    assert len(original.relationships) == 1

    sql = generate_sql(original.tables)
    assert "FOREIGN KEY" not in sql

    reparsed = parse_ddl(sql)
    assert [
        [(c.name, c.type, c.is_pk) for c in table.columns] for table in reparsed.tables
    ] == [
        [(c.name, c.type, c.is_pk) for c in table.columns] for table in original.tables
    ]
    assert reparsed.relationships == []


def test_rejects_text_input() -> None:
    """A string is not a sequence of tables."""
    with pytest.raises(TypeError):
        generate_sql("CREATE TABLE t (id INT)")  # type: ignore[arg-type]
