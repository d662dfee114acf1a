"""Command line interface for ERD Toolkit."""

import sys
from collections.abc import Iterable
from dataclasses import replace
from json import JSONDecodeError, dumps, loads
from pathlib import Path
from typing import Literal

from cyclopts import App
from rich.console import Console
from rich.table import Table

from ddl import generate_sql, get_sample, get_samples, parse_ddl
from diagram import (
    Direction,
    LayoutConfig,
    SchemaGraph,
    diagram_to_graph,
    graph_to_diagram,
    layout_graph,
    load_layout_config,
)

app = App(help="ERD Toolkit CLI tool")


type Format = Literal["json", "table", "sql"]

console = Console()
err_console = Console(stderr=True)

# Constants
SQL_EXTENSIONS = {".sql", ".ddl", ".txt"}
DIAGRAM_EXTENSIONS = {".json"}
SQLITE_EXTENSIONS = {".sqlite", ".db", ".sqlite3"}


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[bold red]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print success message to stderr."""
    err_console.print(f"[bold green]✓[/] {message}")


def print_info(message: str) -> None:
    """Print info message to stderr."""
    err_console.print(f"[bold blue]i[/] {message}")


def validate_location(location: Path) -> None:
    """Validate input file exists."""
    if not location.is_file():
        print_error(f"File does not exist: {location}")
        sys.exit(1)


def validate_extension(location: Path, file_extensions: Iterable[str]) -> None:
    """Validate input file extension."""
    if location.suffix.lower() not in file_extensions:
        print_error(
            f"File has invalid extension, expected one of: "
            f"{', '.join(sorted(file_extensions))}",
        )
        sys.exit(1)


def resolve_layout(config: Path | None, direction: Direction | None) -> LayoutConfig:
    """Build layout settings from an optional TOML file and direction."""
    try:
        layout = load_layout_config(config) if config else LayoutConfig()
        return replace(layout, direction=direction) if direction else layout
    except (OSError, ValueError) as e:
        print_error(f"Invalid layout configuration: {e}")
        sys.exit(1)


def read_diagram(diagram_location: Path) -> SchemaGraph:
    """Load a diagram JSON document."""
    validate_location(diagram_location)
    validate_extension(diagram_location, DIAGRAM_EXTENSIONS)
    try:
        return diagram_to_graph(loads(diagram_location.read_text()))
    except (JSONDecodeError, KeyError, AttributeError) as e:
        print_error(f"Invalid diagram file {diagram_location}: {e}")
        sys.exit(1)


def format_schema_table(graph: SchemaGraph) -> None:
    """Format tables and relationships as rich tables."""
    tables = Table(title="Tables")
    tables.add_column("Table", style="bold cyan")
    tables.add_column("Column")
    tables.add_column("Type", style="bold yellow")
    tables.add_column("Key", style="bold green")
    tables.add_column("Comment")

    for table in graph.tables:
        for index, column in enumerate(table.columns):
            keys = "/".join(
                key for key, flag in (("PK", column.is_pk), ("FK", column.is_fk)) if flag
            )
            tables.add_row(
                table.label if index == 0 else "",
                column.name,
                column.type,
                keys,
                column.comment,
            )
    console.print(tables)

    if not graph.relationships:
        console.print("No relationships found.")
        return

    relationships = Table(title="Relationships")
    relationships.add_column("From", style="bold cyan")
    relationships.add_column("To", style="bold cyan")
    relationships.add_column("Kind")
    relationships.add_column("Label")
    for rel in graph.relationships:
        relationships.add_row(rel.source_handle, rel.target_handle, rel.kind, rel.label)
    console.print(relationships)


def write_graph(graph: SchemaGraph, name: str, fmt: Format) -> None:
    """Write a graph to stdout in the requested format."""
    if fmt == "json":
        sys.stdout.write(dumps(graph_to_diagram(graph, name), indent=2))
    elif fmt == "sql":
        sys.stdout.write(generate_sql(graph.tables))
    elif fmt == "table":
        format_schema_table(graph)


def import_sql(sql: str, layout: LayoutConfig) -> SchemaGraph:
    """Parse and lay out SQL text, exiting when nothing can be imported."""
    graph = parse_ddl(sql)
    if not graph.tables:
        print_error("Import failed: no CREATE TABLE statements found")
        sys.exit(1)
    print_info(
        f"Parsed {len(graph.tables)} tables and "
        f"{len(graph.relationships)} relationships",
    )
    return layout_graph(graph, config=layout)


@app.command
def parse(
    sql_location: Path,
    fmt: Format = "json",
    *,
    direction: Direction | None = None,
    config: Path | None = None,
) -> None:
    """Import a SQL script as a laid out diagram."""
    validate_location(sql_location)
    validate_extension(sql_location, SQL_EXTENSIONS)
    print_info(f"Source script: {sql_location}")
    print_info(f"Output format: {fmt}")

    graph = import_sql(sql_location.read_text(), resolve_layout(config, direction))
    write_graph(graph, sql_location.stem, fmt)
    print_success("Import completed successfully")


@app.command
def generate(diagram_location: Path) -> None:
    """Generate CREATE TABLE statements from a diagram file."""
    graph = read_diagram(diagram_location)
    print_info(f"Source diagram: {diagram_location}")
    sys.stdout.write(generate_sql(graph.tables))
    print_success("SQL generation completed successfully")


@app.command(name="layout")
def relayout(
    diagram_location: Path,
    *,
    direction: Direction | None = None,
    config: Path | None = None,
) -> None:
    """Recompute table positions of a diagram file."""
    graph = read_diagram(diagram_location)
    layout = resolve_layout(config, direction)
    print_info(f"Direction: {layout.direction}")
    graph = layout_graph(graph, config=layout)
    sys.stdout.write(dumps(graph_to_diagram(graph, diagram_location.stem), indent=2))
    print_success("Layout completed successfully")


@app.command
def samples(sample_id: str | None = None, fmt: Format = "table") -> None:
    """List bundled sample schemas or import one of them."""
    if sample_id is None:
        table = Table(title="Sample Schemas")
        table.add_column("Id", style="bold cyan")
        table.add_column("Name")
        table.add_column("Description")
        for sample in get_samples():
            table.add_row(sample["id"], sample["name"], sample["description"])
        console.print(table)
        return

    try:
        sample = get_sample(sample_id)
    except ValueError as e:
        print_error(str(e))
        sys.exit(1)

    graph = import_sql(sample["sql"], LayoutConfig())
    write_graph(graph, sample["id"], fmt)


@app.command
def sqlite(
    sqlite_location: Path,
    fmt: Format = "json",
    *,
    direction: Direction | None = None,
    config: Path | None = None,
) -> None:
    """Import the tables of an SQLite database as a diagram."""
    try:
        from ddl.sqlite_source import read_only_sqlite, sqlite_to_ddl
    except ImportError:
        print_error("SQLite import requires [sqlite] extra dependencies")
        sys.exit(1)

    from sqlalchemy.exc import SQLAlchemyError

    validate_location(sqlite_location)
    validate_extension(sqlite_location, SQLITE_EXTENSIONS)
    print_info(f"Source database: {sqlite_location}")

    try:
        sql = sqlite_to_ddl(read_only_sqlite(sqlite_location))
    except SQLAlchemyError as e:
        print_error(f"Failed to read database: {e}")
        sys.exit(1)

    graph = import_sql(sql, resolve_layout(config, direction))
    write_graph(graph, sqlite_location.stem, fmt)
    print_success("Import completed successfully")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
