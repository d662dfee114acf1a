"""Best-effort parsing of ``CREATE TABLE`` scripts into a schema graph."""

import re
from logging import getLogger
from typing import NamedTuple

from ddl.inference import infer_relationships
from ddl.lexer import (
    NOT_FOUND,
    find_matching_paren,
    find_type_end,
    split_by_delimiter,
    strip_comments,
)
from diagram.types import (
    Column,
    Relationship,
    SchemaGraph,
    Table,
    column_id,
    source_handle,
    table_id,
    target_handle,
)

logger = getLogger(__name__)

# Reusable regex components
IDENTIFIER = r"[`\"\[]?(\w+)[`\"\]]?"  # Captures identifier inside optional quotes
QUOTED = r"'((?:[^'\\]|\\.)*)'|\"((?:[^\"\\]|\\.)*)\""  # Single or double quoted
WHITESPACE = r"\s*"
OPEN_PAREN = r"\("
CLOSE_PAREN = r"\)"

CREATE_TABLE = re.compile(
    r"^CREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?" + IDENTIFIER,
    re.IGNORECASE,
)
FOREIGN_KEY = re.compile(
    WHITESPACE.join(
        (
            r"FOREIGN\s+KEY",
            OPEN_PAREN,
            IDENTIFIER,
            CLOSE_PAREN,
            "REFERENCES",
            IDENTIFIER,
            OPEN_PAREN,
            IDENTIFIER,
            CLOSE_PAREN,
        ),
    ),
    re.IGNORECASE,
)
PRIMARY_KEY_COLUMNS = re.compile(r"PRIMARY\s+KEY\s*\((.*?)\)", re.IGNORECASE)
TABLE_COMMENT = re.compile(rf"COMMENT\s*=?\s*(?:{QUOTED})", re.IGNORECASE)
COLUMN_COMMENT = re.compile(rf"COMMENT\s+(?:{QUOTED})", re.IGNORECASE)

INDEX_CLAUSE = re.compile(r"^(?:KEY|INDEX|UNIQUE|FULLTEXT)\b", re.IGNORECASE)
PRIMARY_KEY_CLAUSE = re.compile(r"^PRIMARY\s+KEY\b", re.IGNORECASE)
FOREIGN_KEY_CLAUSE = re.compile(r"^(?:CONSTRAINT|FOREIGN\s+KEY)\b", re.IGNORECASE)
INLINE_PRIMARY_KEY = re.compile(r"PRIMARY\s+KEY", re.IGNORECASE)
NOT_NULL = re.compile(r"\bNOT\s+NULL\b", re.IGNORECASE)
NAME_QUOTES = re.compile(r"[`\"\[\]]")
ESCAPED_CHAR = re.compile(r"\\([\\'\"])")  # \\, \' or \"


class ForeignKeyRef(NamedTuple):
    """A foreign key clause: ``table.column`` references ``referenced.key``."""

    table: str
    column: str
    referenced_table: str
    referenced_column: str


class ParsedTable(NamedTuple):
    """A table node and the foreign keys declared in its body."""

    table: Table
    foreign_keys: list[ForeignKeyRef]


def _quoted(pattern: re.Pattern[str], text: str) -> str:
    """Content of the first quoted literal matched by pattern, unescaped."""
    if match := pattern.search(text):
        value = match[1] if match[1] is not None else match[2]
        return ESCAPED_CHAR.sub(r"\1", value)
    return ""


def parse_column(clause: str, table: str) -> Column | None:
    """Parse a column definition such as ``price DECIMAL(10,2) NOT NULL``.

    Returns None when the clause carries a name but no type.
    """
    parts = clause.strip().split(maxsplit=1)
    if len(parts) < 2:  # noqa: PLR2004
        return None

    name = NAME_QUOTES.sub("", parts[0])
    rest = parts[1]
    type_end = find_type_end(rest)
    modifiers = rest[type_end:].strip()

    return Column(
        id=column_id(table, name),
        name=name,
        type=rest[:type_end].upper(),
        is_pk=bool(INLINE_PRIMARY_KEY.search(modifiers)),
        is_fk=False,
        comment=_quoted(COLUMN_COMMENT, modifiers),
        nullable=not NOT_NULL.search(modifiers),
    )


def _primary_key_names(clause: str) -> list[str]:
    """Column names listed in a ``PRIMARY KEY (...)`` clause."""
    if match := PRIMARY_KEY_COLUMNS.search(clause):
        return [NAME_QUOTES.sub("", name.strip()) for name in match[1].split(",")]
    return []


def parse_table_statement(statement: str) -> ParsedTable | None:
    """Parse one ``CREATE TABLE`` statement.

    Statements of any other kind, or without a balanced column body, give None.
    Primary key constraints are applied once all columns are known, so their
    position in the body does not matter.
    """
    statement = statement.strip()
    header = CREATE_TABLE.match(statement)
    if not header:
        return None

    name = header[1]
    body_start = statement.find("(", header.end())
    if body_start == NOT_FOUND:
        logger.debug("Table %s has no column body, skipping", name)
        return None

    body_end = find_matching_paren(statement, body_start)
    if body_end == NOT_FOUND:
        logger.debug("Table %s has an unbalanced column body, skipping", name)
        return None

    body = statement[body_start + 1 : body_end]
    options = statement[body_end + 1 :]

    columns: list[Column] = []
    primary_keys: list[str] = []
    foreign_keys: list[ForeignKeyRef] = []

    for part in split_by_delimiter(body, ","):
        clause = part.strip()
        if not clause or INDEX_CLAUSE.match(clause):
            continue

        if PRIMARY_KEY_CLAUSE.match(clause):
            primary_keys.extend(_primary_key_names(clause))
            continue

        if FOREIGN_KEY_CLAUSE.match(clause):
            if match := FOREIGN_KEY.search(clause):
                foreign_keys.append(ForeignKeyRef(name, match[1], match[2], match[3]))
            else:
                logger.debug("Unrecognized constraint in %s: %s", name, clause)
            continue

        if column := parse_column(clause, name):
            columns.append(column)
        else:
            logger.debug("Unrecognized clause in %s: %s", name, clause)

    fk_columns = {fk.column for fk in foreign_keys}
    for column in columns:
        column.is_pk = column.is_pk or column.name in primary_keys
        column.is_fk = column.name in fk_columns

    table = Table(
        id=table_id(name),
        label=name,
        columns=columns,
        comment=_quoted(TABLE_COMMENT, options),
    )
    return ParsedTable(table, foreign_keys)


def _foreign_key_relationships(
    foreign_keys: list[ForeignKeyRef],
    known_tables: set[str],
) -> list[Relationship]:
    """Edges pointing from each referenced table to the table holding the key."""
    relationships: list[Relationship] = []
    for index, fk in enumerate(foreign_keys):
        source = table_id(fk.referenced_table)
        if source not in known_tables:
            logger.warning(
                "Foreign key %s.%s references unknown table %s, dropping it",
                fk.table,
                fk.column,
                fk.referenced_table,
            )
            continue
        relationships.append(
            Relationship(
                id=f"e-{index}-{fk.referenced_table}-{fk.table}",
                source=source,
                target=table_id(fk.table),
                source_handle=source_handle(
                    column_id(fk.referenced_table, fk.referenced_column),
                ),
                target_handle=target_handle(column_id(fk.table, fk.column)),
            ),
        )
    return relationships


def parse_ddl(sql: str) -> SchemaGraph:
    """Parse a SQL script into tables and relationships.

    Comments are stripped first, then every ``CREATE TABLE`` statement is
    parsed on its own; anything unparseable is skipped. When the script
    declares no foreign keys at all, relationships are inferred from column
    naming. An empty graph means nothing could be imported.
    """
    if not isinstance(sql, str):
        msg = f"Expected SQL text, got {type(sql).__name__}"
        raise TypeError(msg)

    tables: dict[str, Table] = {}
    foreign_keys: list[ForeignKeyRef] = []

    for statement in split_by_delimiter(strip_comments(sql), ";"):
        parsed = parse_table_statement(statement)
        if parsed is None:
            if statement.strip():
                logger.debug("Skipping statement: %.60s", statement.strip())
            continue

        table = parsed.table
        if table.id in tables:
            logger.warning("Table %s is defined twice, keeping the last", table.label)
            foreign_keys = [fk for fk in foreign_keys if fk.table != table.label]
        tables[table.id] = table
        foreign_keys.extend(parsed.foreign_keys)

    parsed_tables = list(tables.values())
    if not foreign_keys and len(parsed_tables) > 1:
        return infer_relationships(parsed_tables)

    return SchemaGraph(
        tables=parsed_tables,
        relationships=_foreign_key_relationships(foreign_keys, set(tables)),
    )
