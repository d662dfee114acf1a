"""DDL generation from schema graph tables."""

from collections.abc import Sequence
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from diagram.types import Table

TEMPLATE_DIR = Path(__file__).parent / "templates"
INDENT = "  "

_JINJA_ENV = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(),
    trim_blocks=True,
    lstrip_blocks=True,
)


def quote_literal(text: str) -> str:
    """Escape backslashes and single quotes for a single-quoted SQL literal."""
    return text.replace("\\", "\\\\").replace("'", "\\'")


def column_lines(table: Table) -> list[str]:
    """Column definitions in stored order, then the primary key clause."""
    lines: list[str] = []
    for column in table.columns:
        line = f"{INDENT}`{column.name}` {column.type}"
        if column.comment:
            line += f" COMMENT '{quote_literal(column.comment)}'"
        lines.append(line)

    if pk_names := [f"`{column.name}`" for column in table.primary_keys]:
        lines.append(f"{INDENT}PRIMARY KEY ({', '.join(pk_names)})")
    return lines


def generate_sql(tables: Sequence[Table]) -> str:
    """Render one ``CREATE TABLE`` statement per table.

    Foreign keys are not emitted; re-parsing the output recovers columns,
    types and primary keys only.
    """
    if tables is None or isinstance(tables, str):
        msg = f"Expected a sequence of tables, got {type(tables).__name__}"
        raise TypeError(msg)

    template = _JINJA_ENV.get_template("ddl.sql.j2")
    return template.render(
        tables=[
            {
                "label": table.label,
                "body": ",\n".join(column_lines(table)),
                "comment": quote_literal(table.comment),
            }
            for table in tables
        ],
    )
