#!/usr/bin/env python3
import logging
from dataclasses import dataclass

from sqlalchemy import create_engine, inspect, text, exc
from sqlalchemy.engine import URL

from dbcompare_errors import DatabaseConnectionError, QueryError

logger = logging.getLogger(__name__)

# Поддерживаемые СУБД: драйвер SQLAlchemy, порт по умолчанию, параметры строки подключения
DIALECTS = {
    "mysql": ("mysql+pymysql", 3306, {"charset": "utf8mb4"}),
    "postgresql": ("postgresql+psycopg2", 5432, {}),
}
DEFAULT_DIALECT = "mysql"


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    declared_type: str


def build_url(host, database, user, password, dialect=DEFAULT_DIALECT, port=None):
    """Формирует URL подключения SQLAlchemy для указанной СУБД."""
    if dialect not in DIALECTS:
        raise DatabaseConnectionError(
            f"Unsupported database type '{dialect}' (expected one of: {', '.join(DIALECTS)})"
        )
    drivername, default_port, query = DIALECTS[dialect]
    try:
        port = int(port) if port else default_port
    except ValueError:
        raise DatabaseConnectionError(f"Invalid port: {port}") from None
    return URL.create(
        drivername,
        username=user,
        password=password,
        host=host,
        port=port,
        database=database,
        query=query,
    )


class Connection:
    """Подключение к одной из сравниваемых баз.

    Движок SQLAlchemy создаётся сразу, соединение открывается при первом запросе
    и используется повторно для всех последующих запросов.
    """

    def __init__(self, engine, label="DB"):
        self.engine = engine
        self.label = label
        self._conn = None

    @classmethod
    def from_url(cls, url, label="DB"):
        try:
            engine = create_engine(url)
        except (exc.SQLAlchemyError, ImportError) as e:
            raise DatabaseConnectionError(f"{label}: cannot create engine: {e}") from e
        return cls(engine, label)

    def connect(self):
        """Открывает соединение, если оно ещё не открыто."""
        if self._conn is None:
            try:
                self._conn = self.engine.connect()
            except exc.SQLAlchemyError as e:
                raise DatabaseConnectionError(f"{self.label}: connection failed: {e}") from e
            logger.debug("%s: connected to %s", self.label,
                         self.engine.url.render_as_string(hide_password=True))
        return self._conn

    def close(self):
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        self.engine.dispose()

    def quote(self, name):
        """Экранирует имя таблицы или столбца по правилам диалекта (в MySQL — обратные кавычки)."""
        return self.engine.dialect.identifier_preparer.quote_identifier(name)

    def query_all(self, sql, params=None):
        """Выполняет запрос и возвращает все строки списком словарей."""
        logger.debug("%s: %s %s", self.label, sql, params or "")
        try:
            result = self.connect().execute(text(sql), params or {})
            return [dict(row) for row in result.mappings().all()]
        except exc.SQLAlchemyError as e:
            raise QueryError(f"{self.label}: query failed: {e}") from e

    def stream(self, sql, params=None):
        """Выполняет запрос и отдаёт строки по одной (курсор на стороне сервера, если драйвер умеет)."""
        logger.debug("%s: streaming %s", self.label, sql)
        try:
            result = self.connect().execute(
                text(sql), params or {}, execution_options={"stream_results": True}
            )
            for row in result.mappings():
                yield dict(row)
        except exc.SQLAlchemyError as e:
            raise QueryError(f"{self.label}: query failed: {e}") from e

    def query_one(self, sql, params):
        """Выполняет параметризованный запрос и возвращает первую строку или None."""
        try:
            row = self.connect().execute(text(sql), params).mappings().first()
        except exc.SQLAlchemyError as e:
            raise QueryError(f"{self.label}: query failed: {e}") from e
        return dict(row) if row is not None else None

    def list_tables(self):
        """Имена таблиц и представлений, как их показывает SHOW TABLES."""
        try:
            inspector = inspect(self.connect())
            names = inspector.get_table_names()
            names.extend(name for name in inspector.get_view_names() if name not in names)
            return names
        except exc.SQLAlchemyError as e:
            raise QueryError(f"{self.label}: cannot list tables: {e}") from e

    def get_columns(self, table):
        """Возвращает описания столбцов таблицы или None, если таблицы нет в этой базе."""
        try:
            inspector = inspect(self.connect())
            if not inspector.has_table(table):
                return None
            columns = inspector.get_columns(table)
        except exc.SQLAlchemyError as e:
            raise QueryError(f"{self.label}: cannot read columns of '{table}': {e}") from e
        return [ColumnDescriptor(col["name"], str(col["type"])) for col in columns]


def open_connection(host, database, user, password, dialect=DEFAULT_DIALECT, port=None, label="DB"):
    """Создаёт подключение и сразу проверяет его, чтобы ошибка учётных данных всплыла до начала сравнения."""
    url = build_url(host, database, user, password, dialect, port)
    connection = Connection.from_url(url, label)
    connection.connect()
    return connection
