"""Tests for the bundled sample schemas."""

import pytest

from ddl.parser import parse_ddl
from ddl.samples import get_sample, get_samples


def test_samples_catalogue() -> None:
    """Every sample carries its metadata and SQL."""
    samples = get_samples()

    assert [sample["id"] for sample in samples] == ["ecommerce", "blog", "school"]
    for sample in samples:
        assert sample["name"]
        assert sample["description"]
        assert "CREATE TABLE" in sample["sql"]


@pytest.mark.parametrize("sample_id", ["ecommerce", "blog", "school"])
def test_samples_parse(sample_id: str) -> None:
    """Every sample imports with relationships."""
    graph = parse_ddl(get_sample(sample_id)["sql"])

    assert len(graph.tables) >= 4
    assert graph.relationships
    known = {table.id for table in graph.tables}
    for relationship in graph.relationships:
        assert relationship.source in known
        assert relationship.target in known


def test_school_sample_relationships_are_inferred() -> None:
    """The school sample declares no constraints."""
    graph = parse_ddl(get_sample("school")["sql"])

    assert {rel.kind for rel in graph.relationships} == {"inferred"}
    assert {(rel.source, rel.target) for rel in graph.relationships} == {
        ("node-students", "node-enrollments"),
        ("node-instructors", "node-courses"),
        ("node-courses", "node-enrollments"),
    }


def test_unknown_sample() -> None:
    """Unknown ids are rejected."""
    with pytest.raises(ValueError, match="Unknown sample"):
        get_sample("missing")
