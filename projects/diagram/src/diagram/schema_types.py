"""TypedDict schemas for the diagram JSON structure.

Field names follow the node/edge documents consumed by the canvas and stored
with saved projects.
"""

from typing import Literal, NotRequired, TypedDict


class PositionSchema(TypedDict):
    """Top-left corner of a node."""

    x: float
    y: float


class ColumnSchema(TypedDict):
    """Schema for a table column row."""

    id: str
    name: str
    type: str
    isPk: bool
    isFk: bool
    comment: NotRequired[str]
    nullable: NotRequired[bool]
    color: NotRequired[str]  # Row background


class TableDataSchema(TypedDict):
    """Payload of a table node."""

    label: str
    columns: list[ColumnSchema]
    comment: NotRequired[str]
    isExpanded: NotRequired[bool]
    headerColor: NotRequired[str]
    dimmed: NotRequired[bool]


class NodeSchema(TypedDict):
    """Schema for a table node."""

    id: str
    type: Literal["table"]
    position: PositionSchema
    data: TableDataSchema


class EdgeStyleSchema(TypedDict):
    """Stroke styling of an edge."""

    stroke: str
    strokeWidth: NotRequired[int]
    strokeDasharray: NotRequired[str]


class MarkerSchema(TypedDict):
    """Arrow marker at the end of an edge."""

    type: Literal["arrowclosed"]
    color: str


class EdgeDataSchema(TypedDict):
    """Payload of a relationship edge."""

    kind: Literal["explicit", "inferred", "manual"]


class EdgeSchema(TypedDict):
    """Schema for a relationship edge."""

    id: str
    source: str
    target: str
    sourceHandle: str
    targetHandle: str
    type: Literal["default"]
    animated: bool
    label: str
    style: EdgeStyleSchema
    markerEnd: MarkerSchema
    data: NotRequired[EdgeDataSchema]


class DiagramSchema(TypedDict):
    """Root schema for a complete diagram."""

    name: str
    nodes: list[NodeSchema]
    edges: list[EdgeSchema]
