"""Tests for reading table definitions from SQLite."""

import sqlite3
import tempfile
from collections.abc import Iterator
from pathlib import Path

import pytest

from ddl.parser import parse_ddl
from ddl.sqlite_source import read_only_sqlite, sqlite_to_ddl


@pytest.fixture(name="sample_database")
def social_media_sample_database() -> Iterator[Path]:
    """Create a sample SQLite database for testing."""
    with tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False) as f:
        db_path = Path(f.name)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()
    cursor.execute(
        """
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            email VARCHAR(255) UNIQUE NOT NULL,
            name VARCHAR(100)
        )
    """,
    )
    cursor.execute(
        """
        CREATE TABLE posts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            title VARCHAR(255) NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id)
        )
    """,
    )
    cursor.execute("CREATE INDEX idx_posts_user ON posts (user_id)")
    conn.commit()
    conn.close()

    yield db_path

    db_path.unlink()


def test_sqlite_to_ddl(sample_database: Path) -> None:
    """User tables come back as one script, internal tables excluded."""
    engine = read_only_sqlite(sample_database)
    sql = sqlite_to_ddl(engine)
    engine.dispose()

    assert sql.count("CREATE TABLE") == 2
    assert "sqlite_sequence" not in sql
    assert "CREATE INDEX" not in sql


def test_sqlite_script_parses(sample_database: Path) -> None:
    """The stored definitions parse into tables and the declared key."""
    engine = read_only_sqlite(sample_database)
    graph = parse_ddl(sqlite_to_ddl(engine))
    engine.dispose()

    assert [table.label for table in graph.tables] == ["users", "posts"]
    assert graph.tables[0].column("id").is_pk
    assert graph.tables[0].column("email").nullable is False
    [relationship] = graph.relationships
    assert relationship.source == "node-users"
    assert relationship.target == "node-posts"
