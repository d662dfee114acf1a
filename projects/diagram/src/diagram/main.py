"""Editing operations on schema graphs.

Every operation returns a new graph and leaves its input untouched.
"""

from collections.abc import Iterable
from dataclasses import replace

from diagram.types import (
    Cardinality,
    Column,
    Position,
    Relationship,
    SchemaGraph,
    Table,
    column_id,
    source_handle,
    table_id,
    target_handle,
)

DEFAULT_TABLE_LABEL = "New_Table"
DUPLICATE_OFFSET = 50


def _copy(graph: SchemaGraph) -> SchemaGraph:
    return SchemaGraph(
        tables=list(graph.tables),
        relationships=list(graph.relationships),
    )


def _require_table(graph: SchemaGraph, node_id: str) -> Table:
    if table := graph.table(node_id):
        return table
    msg = f"Unknown table: {node_id}"
    raise ValueError(msg)


def _unique_label(base: str, taken: set[str]) -> str:
    label = base
    suffix = 2
    while table_id(label) in taken:
        label = f"{base}_{suffix}"
        suffix += 1
    return label


def new_table(
    label: str = DEFAULT_TABLE_LABEL,
    position: Position | None = None,
) -> Table:
    """A table holding only an integer ``id`` primary key."""
    return Table(
        id=table_id(label),
        label=label,
        columns=[Column(id=column_id(label, "id"), name="id", type="INT", is_pk=True)],
        position=position or Position(),
    )


def add_table(graph: SchemaGraph, table: Table) -> SchemaGraph:
    """Append a table whose id is not taken yet."""
    if table.id in graph.table_ids:
        msg = f"Table already exists: {table.id}"
        raise ValueError(msg)
    result = _copy(graph)
    result.tables.append(table)
    return result


def update_table(graph: SchemaGraph, table: Table) -> SchemaGraph:
    """Replace the table sharing the given table's id."""
    _require_table(graph, table.id)
    result = _copy(graph)
    result.tables = [table if t.id == table.id else t for t in graph.tables]
    return result


def duplicate_table(
    graph: SchemaGraph,
    node_id: str,
    offset: float = DUPLICATE_OFFSET,
) -> SchemaGraph:
    """Copy a table under a ``_copy`` label, shifted diagonally.

    Columns are re-identified under the new label so their handles stay
    unique. Relationships are not copied.
    """
    original = _require_table(graph, node_id)
    label = _unique_label(f"{original.label}_copy", graph.table_ids)
    copy = replace(
        original,
        id=table_id(label),
        label=label,
        columns=[
            replace(column, id=column_id(label, column.name))
            for column in original.columns
        ],
        position=Position(original.position.x + offset, original.position.y + offset),
    )
    return add_table(graph, copy)


def remove_table(graph: SchemaGraph, node_id: str) -> SchemaGraph:
    """Remove a table together with every relationship touching it."""
    _require_table(graph, node_id)
    return SchemaGraph(
        tables=[table for table in graph.tables if table.id != node_id],
        relationships=[
            rel
            for rel in graph.relationships
            if node_id not in {rel.source, rel.target}
        ],
    )


def prune_relationships(graph: SchemaGraph) -> SchemaGraph:
    """Drop relationships whose source or target table does not exist."""
    known = graph.table_ids
    return SchemaGraph(
        tables=list(graph.tables),
        relationships=[
            rel
            for rel in graph.relationships
            if rel.source in known and rel.target in known
        ],
    )


def _column_owner(graph: SchemaGraph, col_id: str) -> Table:
    for table in graph.tables:
        if any(column.id == col_id for column in table.columns):
            return table
    msg = f"Unknown column: {col_id}"
    raise ValueError(msg)


def connect_tables(
    graph: SchemaGraph,
    source_column: str,
    target_column: str,
    cardinality: Cardinality | str = Cardinality.ONE_TO_MANY,
) -> SchemaGraph:
    """Draw a relationship between two columns, labelled with its cardinality.

    Connecting the same pair of columns twice leaves the graph unchanged.
    """
    label = Cardinality(cardinality)
    source = _column_owner(graph, source_column)
    target = _column_owner(graph, target_column)
    relationship = Relationship(
        id=f"e-{source_handle(source_column)}-{target_handle(target_column)}",
        source=source.id,
        target=target.id,
        source_handle=source_handle(source_column),
        target_handle=target_handle(target_column),
        label=label.value,
        kind="manual",
    )
    result = _copy(graph)
    if all(rel.id != relationship.id for rel in graph.relationships):
        result.relationships.append(relationship)
    return result


def find_table(graph: SchemaGraph, query: str) -> Table | None:
    """First table whose label contains the query, ignoring case."""
    if not query:
        return None
    needle = query.lower()
    return next(
        (table for table in graph.tables if needle in table.label.lower()),
        None,
    )


def highlight(
    graph: SchemaGraph,
    node_ids: Iterable[str] = (),
    edge_ids: Iterable[str] = (),
) -> tuple[SchemaGraph, set[str]]:
    """Dim every table outside the current focus.

    Selected edges bring their two endpoints into focus. Selected or hovered
    tables bring their incident edges and the tables at the other end. With
    nothing selected all dimming is cleared. Returns the graph and the ids of
    highlighted relationships.
    """
    roots = set(node_ids)
    selected_edges = set(edge_ids)
    if not roots and not selected_edges:
        return (
            SchemaGraph(
                tables=[replace(table, dimmed=False) for table in graph.tables],
                relationships=list(graph.relationships),
            ),
            set(),
        )

    focused_tables = set(roots)
    focused_edges: set[str] = set()
    for rel in graph.relationships:
        if rel.id in selected_edges or roots & {rel.source, rel.target}:
            focused_edges.add(rel.id)
            focused_tables.update((rel.source, rel.target))

    tables = [
        replace(table, dimmed=table.id not in focused_tables) for table in graph.tables
    ]
    return (
        SchemaGraph(tables=tables, relationships=list(graph.relationships)),
        focused_edges,
    )
