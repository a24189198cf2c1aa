"""Pytest configuration and fixtures."""

import os
import re

import pytest

os.environ.setdefault(
    "MSSQL_CONNECTION_STRING",
    "Server=localhost;Database=ImplicitConversionTest;Trusted_Connection=True;",
)

from config import ConnectionSettings  # noqa: E402
from db.context import ImplicitConversionContext  # noqa: E402
from db.model_config import build_mapping  # noqa: E402

_TABLE_RE = re.compile(r"FROM \[dbo\]\.\[(\w+)\]")


class FakeCursor:
    """DB-API cursor over in-memory rows; filters on the text column only."""

    def __init__(self, connection):
        self.connection = connection
        self._rows = []

    def execute(self, sql, params=None):
        self.connection.executed.append((sql, params))
        table = _TABLE_RE.search(sql).group(1)
        rows = self.connection.tables.get(table, [])
        if params:
            value = params[0]
            if isinstance(value, bytes):
                value = value.decode("utf-8")
            rows = [row for row in rows if row[1] == value]
        self._rows = list(rows)

    def fetchall(self):
        return list(self._rows)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeConnection:
    def __init__(self, tables):
        self.tables = tables
        self.executed = []
        self.closed = False

    def cursor(self):
        return FakeCursor(self)

    def close(self):
        self.closed = True


class FakeServer:
    """Stands in for pymssql.connect; remembers every connection it opened."""

    def __init__(self, tables=None):
        self.tables = tables if tables is not None else {
            "BadType": [(1, "Hello World"), (2, "Goodbye World")],
            "GoodType": [(1, "Hello World"), (2, "Goodbye World")],
        }
        self.connections = []
        self.connect_kwargs = []

    def __call__(self, **kwargs):
        self.connect_kwargs.append(kwargs)
        conn = FakeConnection(self.tables)
        self.connections.append(conn)
        return conn


@pytest.fixture
def settings():
    return ConnectionSettings.from_connection_string(
        "Server=localhost;Database=ImplicitConversionTest;Trusted_Connection=True;"
    )


@pytest.fixture
def mapping():
    return build_mapping()


@pytest.fixture
def fake_server():
    return FakeServer()


@pytest.fixture
def context(settings, mapping, fake_server):
    with ImplicitConversionContext(settings, mapping, connect=fake_server) as ctx:
        yield ctx
