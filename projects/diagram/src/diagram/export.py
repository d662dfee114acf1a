"""Conversion between schema graphs and diagram JSON documents."""

from typing import Any

from diagram.schema_types import (
    ColumnSchema,
    DiagramSchema,
    EdgeSchema,
    EdgeStyleSchema,
    NodeSchema,
    TableDataSchema,
)
from diagram.types import (
    EDGE_STYLES,
    Column,
    EdgeStyle,
    Position,
    Relationship,
    RelationshipKind,
    SchemaGraph,
    Table,
)


def _column_to_json(column: Column) -> ColumnSchema:
    schema: ColumnSchema = {
        "id": column.id,
        "name": column.name,
        "type": column.type,
        "isPk": column.is_pk,
        "isFk": column.is_fk,
        "comment": column.comment,
    }
    if column.nullable is not None:
        schema["nullable"] = column.nullable
    if column.color is not None:
        schema["color"] = column.color
    return schema


def _table_to_json(table: Table) -> NodeSchema:
    data: TableDataSchema = {
        "label": table.label,
        "columns": [_column_to_json(column) for column in table.columns],
        "comment": table.comment,
        "isExpanded": table.is_expanded,
        "dimmed": table.dimmed,
    }
    if table.header_color is not None:
        data["headerColor"] = table.header_color
    return {
        "id": table.id,
        "type": "table",
        "position": {"x": table.position.x, "y": table.position.y},
        "data": data,
    }


def _style_to_json(style: EdgeStyle) -> EdgeStyleSchema:
    schema: EdgeStyleSchema = {"stroke": style.stroke}
    if style.stroke_width is not None:
        schema["strokeWidth"] = style.stroke_width
    if style.dash_array is not None:
        schema["strokeDasharray"] = style.dash_array
    return schema


def _relationship_to_json(rel: Relationship) -> EdgeSchema:
    return {
        "id": rel.id,
        "source": rel.source,
        "target": rel.target,
        "sourceHandle": rel.source_handle,
        "targetHandle": rel.target_handle,
        "type": "default",
        "animated": False,
        "label": rel.label,
        "style": _style_to_json(rel.style),
        "markerEnd": {"type": "arrowclosed", "color": rel.style.marker_color},
        "data": {"kind": rel.kind},
    }


def graph_to_diagram(graph: SchemaGraph, name: str = "diagram") -> DiagramSchema:
    """Build the JSON document for a schema graph."""
    return {
        "name": name,
        "nodes": [_table_to_json(table) for table in graph.tables],
        "edges": [_relationship_to_json(rel) for rel in graph.relationships],
    }


def _column_from_json(column: dict[str, Any]) -> Column:
    return Column(
        id=column["id"],
        name=column["name"],
        type=column.get("type", ""),
        is_pk=bool(column.get("isPk", False)),
        is_fk=bool(column.get("isFk", False)),
        comment=column.get("comment") or "",
        nullable=column.get("nullable"),
        color=column.get("color"),
    )


def _table_from_json(node: dict[str, Any]) -> Table:
    data = node.get("data", {})
    position = node.get("position", {})
    return Table(
        id=node["id"],
        label=data.get("label", ""),
        columns=[_column_from_json(column) for column in data.get("columns", [])],
        comment=data.get("comment") or "",
        is_expanded=data.get("isExpanded", True) is not False,
        header_color=data.get("headerColor"),
        dimmed=bool(data.get("dimmed", False)),
        position=Position(x=position.get("x", 0.0), y=position.get("y", 0.0)),
    )


def _edge_kind(edge: dict[str, Any]) -> RelationshipKind:
    kind = edge.get("data", {}).get("kind")
    if kind in EDGE_STYLES:
        return kind
    if edge.get("style", {}).get("strokeDasharray"):
        return "inferred"
    return "manual" if edge.get("label") else "explicit"


def _relationship_from_json(edge: dict[str, Any]) -> Relationship:
    return Relationship(
        id=edge["id"],
        source=edge["source"],
        target=edge["target"],
        source_handle=edge.get("sourceHandle") or "",
        target_handle=edge.get("targetHandle") or "",
        label=edge.get("label") or "",
        kind=_edge_kind(edge),
    )


def diagram_to_graph(diagram: DiagramSchema | dict[str, Any]) -> SchemaGraph:
    """Rebuild a schema graph from a JSON document.

    Unknown keys are ignored and missing optional keys take their defaults.
    """
    return SchemaGraph(
        tables=[_table_from_json(node) for node in diagram.get("nodes", [])],
        relationships=[
            _relationship_from_json(edge) for edge in diagram.get("edges", [])
        ],
    )
