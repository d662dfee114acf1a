"""ER diagram model, editing and layout package."""

from diagram.export import diagram_to_graph, graph_to_diagram
from diagram.layout import (
    Direction,
    LayoutConfig,
    layout_graph,
    load_layout_config,
)
from diagram.main import (
    add_table,
    connect_tables,
    duplicate_table,
    find_table,
    highlight,
    new_table,
    prune_relationships,
    remove_table,
    update_table,
)
from diagram.types import (
    Cardinality,
    Column,
    Position,
    Relationship,
    SchemaGraph,
    Table,
)

__all__ = [
    "Cardinality",
    "Column",
    "Direction",
    "LayoutConfig",
    "Position",
    "Relationship",
    "SchemaGraph",
    "Table",
    "add_table",
    "connect_tables",
    "diagram_to_graph",
    "duplicate_table",
    "find_table",
    "graph_to_diagram",
    "highlight",
    "layout_graph",
    "load_layout_config",
    "new_table",
    "prune_relationships",
    "remove_table",
    "update_table",
]
