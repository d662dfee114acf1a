"""Layered layout of schema graphs.

Tables are ranked along the primary axis following relationship direction,
ordered within each rank by the barycenter heuristic to reduce crossings, and
stacked along the secondary axis. The result only depends on the input order
of tables and relationships, so repeated runs give identical positions.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from tomllib import load
from typing import TYPE_CHECKING, Literal

import networkx as nx

from diagram.types import Position, SchemaGraph, Table

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

type Direction = Literal["LR", "RL", "TB", "BT"]
type Size = tuple[float, float]

DIRECTIONS: tuple[Direction, ...] = ("LR", "RL", "TB", "BT")


@dataclass(frozen=True)
class LayoutConfig:
    """Spacing and node sizing for the layout pass."""

    direction: Direction = "LR"
    rank_sep: float = 150  # Gap between ranks
    node_sep: float = 100  # Gap between nodes of the same rank
    node_width: float = 240
    header_height: float = 40
    row_height: float = 36
    sweeps: int = 4  # Crossing reduction passes

    def __post_init__(self) -> None:
        """Reject unknown directions."""
        if self.direction not in DIRECTIONS:
            msg = f"Unknown layout direction: {self.direction}"
            raise ValueError(msg)

    @property
    def horizontal(self) -> bool:
        """Whether ranks run left to right or right to left."""
        return self.direction in {"LR", "RL"}

    @property
    def reversed(self) -> bool:
        """Whether ranks run against the reading direction."""
        return self.direction in {"RL", "BT"}

    def node_size(self, table: Table) -> Size:
        """Estimated width and height of a rendered table."""
        rows = len(table.columns) if table.is_expanded else 0
        return self.node_width, self.header_height + self.row_height * rows


def load_layout_config(config_location: Path) -> LayoutConfig:
    """Read the ``[layout]`` table of a TOML file."""
    with config_location.open("rb") as f:
        settings = load(f).get("layout", {})
    try:
        return LayoutConfig(**settings)
    except TypeError as err:
        msg = f"Invalid layout settings in {config_location}: {err}"
        raise ValueError(msg) from err


def _build_graph(graph: SchemaGraph) -> nx.DiGraph:
    """Directed graph over table ids, ignoring edges to unknown tables."""
    digraph = nx.DiGraph()
    digraph.add_nodes_from(table.id for table in graph.tables)
    digraph.add_edges_from(
        (rel.source, rel.target)
        for rel in graph.relationships
        if rel.source in digraph and rel.target in digraph
    )
    return digraph


def _break_cycles(digraph: nx.DiGraph) -> nx.DiGraph:
    """Remove one edge per cycle until the graph is acyclic."""
    acyclic = digraph.copy()
    acyclic.remove_edges_from(list(nx.selfloop_edges(acyclic)))
    while True:
        try:
            cycle = nx.find_cycle(acyclic)
        except nx.NetworkXNoCycle:
            return acyclic
        acyclic.remove_edge(*cycle[-1][:2])


def _assign_ranks(dag: nx.DiGraph, order: dict[str, int]) -> dict[str, int]:
    """Longest path layering; sources sit at rank zero."""
    ranks: dict[str, int] = {}
    for node in nx.lexicographical_topological_sort(dag, key=order.__getitem__):
        ranks[node] = max(
            (ranks[pred] + 1 for pred in dag.predecessors(node)),
            default=0,
        )
    return ranks


def _barycenter(
    node: str,
    neighbours: Callable[[str], Iterable[str]],
    positions: dict[str, int],
) -> float:
    adjacent = [positions[other] for other in neighbours(node)]
    return sum(adjacent) / len(adjacent) if adjacent else positions[node]


def _order_layers(
    dag: nx.DiGraph,
    ranks: dict[str, int],
    order: dict[str, int],
    sweeps: int,
) -> list[list[str]]:
    """Group nodes by rank and reorder each rank by neighbour barycenters."""
    layers: list[list[str]] = [[] for _ in range(max(ranks.values(), default=-1) + 1)]
    for node in sorted(ranks, key=order.__getitem__):
        layers[ranks[node]].append(node)

    for sweep in range(sweeps):
        downward = sweep % 2 == 0
        neighbours = dag.predecessors if downward else dag.successors
        for layer in layers[1:] if downward else layers[-2::-1]:
            positions = {
                node: index for current in layers for index, node in enumerate(current)
            }
            layer.sort(
                key=lambda node: (
                    _barycenter(node, neighbours, positions),  # noqa: B023
                    positions[node],  # noqa: B023
                ),
            )
    return layers


def _centres(
    layers: list[list[str]],
    sizes: dict[str, Size],
    config: LayoutConfig,
) -> dict[str, tuple[float, float]]:
    """Centre of each node as (primary, secondary) axis coordinates."""
    primary_index, secondary_index = (0, 1) if config.horizontal else (1, 0)
    centres: dict[str, tuple[float, float]] = {}
    offset = 0.0

    for layer in layers:
        depth = max(sizes[node][primary_index] for node in layer)
        extents = [sizes[node][secondary_index] for node in layer]
        cursor = -(sum(extents) + config.node_sep * (len(layer) - 1)) / 2
        for node, extent in zip(layer, extents, strict=True):
            centres[node] = (offset + depth / 2, cursor + extent / 2)
            cursor += extent + config.node_sep
        offset += depth + config.rank_sep

    return centres


def layout_graph(
    graph: SchemaGraph,
    direction: Direction | None = None,
    config: LayoutConfig | None = None,
) -> SchemaGraph:
    """Position every table; relationships are passed through unchanged.

    Returns fresh tables with top-left positions, the minimum corner at the
    origin. Cycles are tolerated by ignoring one edge per cycle for ranking.
    """
    config = config or LayoutConfig()
    if direction is not None:
        config = replace(config, direction=direction)

    order = {table.id: index for index, table in enumerate(graph.tables)}
    sizes = {table.id: config.node_size(table) for table in graph.tables}

    dag = _break_cycles(_build_graph(graph))
    ranks = _assign_ranks(dag, order)
    layers = _order_layers(dag, ranks, order, config.sweeps)

    corners: dict[str, tuple[float, float]] = {}
    for node, (primary, secondary) in _centres(layers, sizes, config).items():
        primary = -primary if config.reversed else primary
        x, y = (primary, secondary) if config.horizontal else (secondary, primary)
        width, height = sizes[node]
        corners[node] = (x - width / 2, y - height / 2)

    min_x = min((x for x, _ in corners.values()), default=0.0)
    min_y = min((y for _, y in corners.values()), default=0.0)

    tables = [
        replace(
            table,
            columns=[replace(column) for column in table.columns],
            position=Position(
                x=corners[table.id][0] - min_x,
                y=corners[table.id][1] - min_y,
            ),
        )
        for table in graph.tables
    ]
    return SchemaGraph(tables=tables, relationships=list(graph.relationships))
