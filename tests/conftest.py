"""Shared pytest fixtures: two file-backed SQLite databases standing in for DB1 and DB2."""

import pytest
from sqlalchemy import text

from db_connection import Connection


def _open(path, label):
    connection = Connection.from_url(f"sqlite:///{path}", label)
    yield connection
    connection.close()


@pytest.fixture
def source_db(tmp_path):
    """DB1 (source) connection."""
    yield from _open(tmp_path / "db1.sqlite", "DB1")


@pytest.fixture
def target_db(tmp_path):
    """DB2 (target) connection."""
    yield from _open(tmp_path / "db2.sqlite", "DB2")


@pytest.fixture
def load_table():
    """Returns a helper that creates a table from DDL and inserts rows (dicts)."""

    def _load(connection, ddl, table=None, rows=()):
        with connection.engine.begin() as conn:
            conn.execute(text(ddl))
            for row in rows:
                columns = ", ".join(row)
                placeholders = ", ".join(f":{col}" for col in row)
                conn.execute(text(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"), row)

    return _load
