"""Read ``CREATE TABLE`` text stored in an SQLite database."""

from pathlib import Path

from sqlalchemy import Engine, create_engine, text

TABLE_SQL = text(
    "SELECT sql FROM sqlite_master "
    "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' AND sql IS NOT NULL "
    "ORDER BY rowid",
)


def read_only_sqlite(sqlite_location: Path) -> Engine:
    """Create a read-only SQLAlchemy engine for SQLite database."""
    connection_string = f"sqlite:///{sqlite_location}?mode=ro"
    return create_engine(connection_string, connect_args={"uri": True})


def sqlite_to_ddl(sqlite_database: Engine) -> str:
    """Join the stored definition of every user table into one script."""
    with sqlite_database.connect() as connection:
        statements = connection.execute(TABLE_SQL).scalars().all()

    return "".join(f"{statement};\n\n" for statement in statements)
