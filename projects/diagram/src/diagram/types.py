"""Schema graph model: tables, columns and the relationships between them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Literal

TABLE_ID_PREFIX = "node-"

type RelationshipKind = Literal["explicit", "inferred", "manual"]


def table_id(name: str) -> str:
    """Derive the node id of a table from its name."""
    return f"{TABLE_ID_PREFIX}{name}"


def table_name(node_id: str) -> str:
    """Recover the table name part of a node id."""
    return node_id.removeprefix(TABLE_ID_PREFIX)


def column_id(table: str, column: str) -> str:
    """Derive the column id used as join key by relationship endpoints."""
    return f"{table}-{column}"


def source_handle(col_id: str) -> str:
    """Handle a relationship leaves from."""
    return f"{col_id}-source"


def target_handle(col_id: str) -> str:
    """Handle a relationship arrives at."""
    return f"{col_id}-target"


class Cardinality(StrEnum):
    """Relationship cardinality labels."""

    ONE_TO_ONE = "1:1"
    ONE_TO_MANY = "1:N"
    MANY_TO_ONE = "N:1"
    MANY_TO_MANY = "N:N"


@dataclass(frozen=True)
class EdgeStyle:
    """Stroke and marker styling for a relationship."""

    stroke: str
    stroke_width: int | None = None
    dash_array: str | None = None

    @property
    def marker_color(self) -> str:
        """Arrow marker follows the stroke color."""
        return self.stroke


EXPLICIT_EDGE_STYLE = EdgeStyle(stroke="#94a3b8", stroke_width=2)
INFERRED_EDGE_STYLE = EdgeStyle(stroke="#64748b", dash_array="5,5")
MANUAL_EDGE_STYLE = EXPLICIT_EDGE_STYLE

EDGE_STYLES: dict[RelationshipKind, EdgeStyle] = {
    "explicit": EXPLICIT_EDGE_STYLE,
    "inferred": INFERRED_EDGE_STYLE,
    "manual": MANUAL_EDGE_STYLE,
}


@dataclass
class Position:
    """Top-left corner of a table on the canvas."""

    x: float = 0.0
    y: float = 0.0


@dataclass
class Column:
    """A single column row of a table."""

    id: str
    name: str
    type: str
    is_pk: bool = False
    is_fk: bool = False
    comment: str = ""
    nullable: bool | None = None
    color: str | None = None


@dataclass
class Table:
    """A table node. Column order is declaration order."""

    id: str
    label: str
    columns: list[Column] = field(default_factory=list)
    comment: str = ""
    is_expanded: bool = True
    header_color: str | None = None
    dimmed: bool = False
    position: Position = field(default_factory=Position)

    def column(self, name: str) -> Column | None:
        """Look up a column by name."""
        return next((col for col in self.columns if col.name == name), None)

    @property
    def primary_keys(self) -> list[Column]:
        """Columns flagged as primary key, in declaration order."""
        return [col for col in self.columns if col.is_pk]


@dataclass
class Relationship:
    """Directed edge between two tables.

    For foreign keys the edge points from the referenced table to the table
    holding the foreign key column.
    """

    id: str
    source: str
    target: str
    source_handle: str
    target_handle: str
    label: str = ""
    kind: RelationshipKind = "explicit"

    @property
    def style(self) -> EdgeStyle:
        """Style preset for this kind of relationship."""
        return EDGE_STYLES[self.kind]


@dataclass
class SchemaGraph:
    """Tables and the relationships between them."""

    tables: list[Table] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)

    def table(self, node_id: str) -> Table | None:
        """Look up a table by id."""
        return next((table for table in self.tables if table.id == node_id), None)

    @property
    def table_ids(self) -> set[str]:
        """Ids of all tables in the graph."""
        return {table.id for table in self.tables}
