"""Relationship inference from column naming conventions."""

from collections.abc import Sequence
from dataclasses import replace

from diagram.types import (
    Relationship,
    SchemaGraph,
    Table,
    source_handle,
    target_handle,
)


def singularize(label: str) -> str:
    """Strip a single trailing ``s``."""
    return label.removesuffix("s")


def foreign_key_candidates(label: str) -> set[str]:
    """Column names that would refer to a table by convention.

    ``users`` is referred to by ``users_id`` or ``user_id``.
    """
    return {f"{label}_id", f"{singularize(label)}_id"}


def infer_relationships(tables: Sequence[Table]) -> SchemaGraph:
    """Guess relationships when a schema declares no foreign keys.

    For every primary key column, each other table holding a column named
    after the key's table is linked from the key's table. Returns copies of
    the tables with matched columns flagged as foreign keys, leaving the input
    untouched. Every match produces an edge, so ambiguous schemas may get more
    than one edge per pair.

    Cost is tables * tables * primary key columns.
    """
    relationships: list[Relationship] = []
    matched: set[str] = set()

    for source in tables:
        candidates = foreign_key_candidates(source.label)
        for pk in source.primary_keys:
            for target in tables:
                if target.id == source.id:
                    continue

                match = next(
                    (col for col in target.columns if col.name in candidates),
                    None,
                )
                if match is None:
                    continue

                matched.add(match.id)
                relationships.append(
                    Relationship(
                        id=f"auto-e-{pk.id}-{match.id}",
                        source=source.id,
                        target=target.id,
                        source_handle=source_handle(pk.id),
                        target_handle=target_handle(match.id),
                        kind="inferred",
                    ),
                )

    return SchemaGraph(
        tables=[
            replace(
                table,
                columns=[
                    replace(column, is_fk=column.is_fk or column.id in matched)
                    for column in table.columns
                ],
            )
            for table in tables
        ],
        relationships=relationships,
    )
