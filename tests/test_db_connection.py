"""Tests for the SQLAlchemy-backed connection wrapper."""

import pytest

from db_connection import ColumnDescriptor, build_url, open_connection
from dbcompare_errors import DatabaseConnectionError


class TestBuildUrl:
    def test_mysql_defaults(self):
        url = build_url("localhost", "shop", "root", "pw")
        assert url.drivername == "mysql+pymysql"
        assert url.port == 3306
        assert url.query["charset"] == "utf8mb4"

    def test_postgresql_with_port(self):
        url = build_url("db", "shop", "postgres", "pw", dialect="postgresql", port="5433")
        assert url.drivername == "postgresql+psycopg2"
        assert url.port == 5433
        assert url.database == "shop"

    def test_unknown_dialect(self):
        with pytest.raises(DatabaseConnectionError):
            build_url("db", "shop", "u", "p", dialect="oracle")

    def test_invalid_port(self):
        with pytest.raises(DatabaseConnectionError, match="Invalid port"):
            build_url("db", "shop", "u", "p", port="abc")

    def test_unknown_dialect_fails_before_connecting(self):
        with pytest.raises(DatabaseConnectionError):
            open_connection("db", "shop", "u", "p", dialect="oracle")


class TestConnection:
    @pytest.fixture
    def users(self, source_db, load_table):
        load_table(source_db, "CREATE TABLE users (id INTEGER, name VARCHAR(10))", "users",
                   [{"id": 2, "name": "b"}, {"id": 1, "name": "a"}])

    def test_query_all(self, source_db, users):
        rows = source_db.query_all("SELECT id, name FROM users ORDER BY id")
        assert rows == [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]

    def test_stream_is_lazy_iterator(self, source_db, users):
        rows = source_db.stream("SELECT id FROM users ORDER BY id")
        assert next(rows) == {"id": 1}
        assert list(rows) == [{"id": 2}]

    def test_query_one(self, source_db, users):
        assert source_db.query_one("SELECT name FROM users WHERE id = :key", {"key": 2}) == {"name": "b"}
        assert source_db.query_one("SELECT name FROM users WHERE id = :key", {"key": 9}) is None

    def test_schema_reflection(self, source_db, users):
        assert source_db.list_tables() == ["users"]
        assert source_db.get_columns("users") == [
            ColumnDescriptor("id", "INTEGER"),
            ColumnDescriptor("name", "VARCHAR(10)"),
        ]
        assert source_db.get_columns("missing") is None

    def test_views_are_listed_after_tables(self, source_db, users, load_table):
        load_table(source_db, "CREATE VIEW active_users AS SELECT id FROM users")
        assert source_db.list_tables() == ["users", "active_users"]

    def test_quote(self, source_db):
        assert source_db.quote("order") == '"order"'
