"""Tests for the layered layout."""

from pathlib import Path

import pytest

from ddl import get_sample, parse_ddl
from diagram.layout import LayoutConfig, layout_graph, load_layout_config
from diagram.types import Relationship, SchemaGraph


@pytest.fixture(name="chain_graph")
def create_chain_graph() -> SchemaGraph:
    """Three tables in a foreign key chain plus an unrelated one."""
    return parse_ddl(
        """
        CREATE TABLE users (id INT PRIMARY KEY, name VARCHAR(100));
        CREATE TABLE orders (
            id INT PRIMARY KEY,
            user_id INT,
            total DECIMAL(10,2),
            FOREIGN KEY (user_id) REFERENCES users (id)
        );
        CREATE TABLE order_items (
            id INT PRIMARY KEY,
            order_id INT,
            FOREIGN KEY (order_id) REFERENCES orders (id)
        );
        CREATE TABLE settings (id INT PRIMARY KEY);
        """,
    )


def _positions(graph: SchemaGraph) -> dict[str, tuple[float, float]]:
    return {table.id: (table.position.x, table.position.y) for table in graph.tables}


def test_left_to_right_ranks(chain_graph: SchemaGraph) -> None:
    """Referenced tables sit left of the tables referencing them."""
    positions = _positions(layout_graph(chain_graph))

    assert positions["node-users"][0] < positions["node-orders"][0]
    assert positions["node-orders"][0] < positions["node-order_items"][0]
    assert positions["node-orders"][0] - positions["node-users"][0] == 240 + 150
    assert positions["node-settings"][0] == positions["node-users"][0]


def test_top_to_bottom_ranks(chain_graph: SchemaGraph) -> None:
    """Vertical layouts rank along y."""
    positions = _positions(layout_graph(chain_graph, direction="TB"))

    assert positions["node-users"][1] < positions["node-orders"][1]
    assert positions["node-orders"][1] < positions["node-order_items"][1]


def test_reversed_direction(chain_graph: SchemaGraph) -> None:
    """Right to left mirrors the rank order."""
    positions = _positions(layout_graph(chain_graph, direction="RL"))

    assert positions["node-users"][0] > positions["node-orders"][0]
    assert positions["node-orders"][0] > positions["node-order_items"][0]


def test_origin_and_no_overlap(chain_graph: SchemaGraph) -> None:
    """The minimum corner is the origin and a rank's tables do not overlap."""
    config = LayoutConfig()
    graph = layout_graph(chain_graph, config=config)

    assert min(t.position.x for t in graph.tables) == 0
    assert min(t.position.y for t in graph.tables) == 0

    users = graph.table("node-users")
    settings = graph.table("node-settings")
    top, bottom = sorted((users, settings), key=lambda t: t.position.y)
    assert bottom.position.y - top.position.y >= config.node_size(top)[1] + config.node_sep


def test_layout_is_idempotent(chain_graph: SchemaGraph) -> None:
    """Laying out twice yields the same positions."""
    first = layout_graph(chain_graph)
    second = layout_graph(first)

    assert _positions(first) == _positions(second)


def test_layout_is_pure(chain_graph: SchemaGraph) -> None:
    """Input tables keep their positions; relationships pass through."""
    graph = layout_graph(chain_graph)

    assert all(t.position.x == 0 and t.position.y == 0 for t in chain_graph.tables)
    assert graph.relationships == chain_graph.relationships
    assert graph.tables[0] is not chain_graph.tables[0]
    assert graph.tables[0].columns[0] is not chain_graph.tables[0].columns[0]


def test_node_height_follows_columns() -> None:
    """Collapsed tables only count their header."""
    graph = parse_ddl("CREATE TABLE t (a INT, b INT, c INT);")
    config = LayoutConfig()
    table = graph.tables[0]

    assert config.node_size(table) == (240, 40 + 3 * 36)
    table.is_expanded = False
    assert config.node_size(table) == (240, 40)


def test_cycles_do_not_break_layout(chain_graph: SchemaGraph) -> None:
    """Cyclic and self-referencing relationships are tolerated."""
    chain_graph.relationships.extend(
        [
            Relationship(
                id="back",
                source="node-order_items",
                target="node-users",
                source_handle="order_items-id-source",
                target_handle="users-id-target",
            ),
            Relationship(
                id="self",
                source="node-users",
                target="node-users",
                source_handle="users-id-source",
                target_handle="users-id-target",
            ),
            Relationship(
                id="dangling",
                source="node-gone",
                target="node-users",
                source_handle="gone-id-source",
                target_handle="users-id-target",
            ),
        ],
    )

    graph = layout_graph(chain_graph)

    assert len(graph.tables) == len(chain_graph.tables)
    assert _positions(graph) == _positions(layout_graph(chain_graph))


def test_empty_graph() -> None:
    """Nothing to place."""
    graph = layout_graph(SchemaGraph())

    assert graph.tables == []
    assert graph.relationships == []


def test_sample_layout_has_distinct_positions() -> None:
    """No two tables of a sample share a corner."""
    graph = layout_graph(parse_ddl(get_sample("ecommerce")["sql"]))

    positions = list(_positions(graph).values())
    assert len(set(positions)) == len(positions)


def test_unknown_direction() -> None:
    """Only the four directions are accepted."""
    with pytest.raises(ValueError, match="Unknown layout direction"):
        LayoutConfig(direction="XY")  # type: ignore[arg-type]


def test_load_layout_config(tmp_path: Path) -> None:
    """Settings are read from the layout table of a TOML file."""
    config_file = tmp_path / "erd.toml"
    config_file.write_text('[layout]\ndirection = "TB"\nrank_sep = 80\n')

    config = load_layout_config(config_file)

    assert config.direction == "TB"
    assert config.rank_sep == 80
    assert config.node_sep == LayoutConfig().node_sep


def test_load_layout_config_rejects_unknown_keys(tmp_path: Path) -> None:
    """Typos in the settings are reported."""
    config_file = tmp_path / "erd.toml"
    config_file.write_text("[layout]\nranksep = 80\n")

    with pytest.raises(ValueError, match="Invalid layout settings"):
        load_layout_config(config_file)
