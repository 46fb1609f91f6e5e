"""Shared pytest fixtures for schemaQL unit and integration tests."""
from __future__ import annotations

import pytest

from schemaql.compile.sqlite import SQLiteDialect
from schemaql.compile.sqlserver import SQLServerDialect
from schemaql.schema.catalog import SchemaCatalog
from schemaql.schema.snapshot import SchemaSnapshot, TableInfo
from tests.fixtures import load_schema_snapshot


@pytest.fixture(scope="session")
def snapshot() -> SchemaSnapshot:
    """Canonical schema snapshot, SQL Server quoting."""
    return load_schema_snapshot(SQLServerDialect())


@pytest.fixture(scope="session")
def sqlite_snapshot() -> SchemaSnapshot:
    """Canonical schema snapshot, SQLite quoting."""
    return load_schema_snapshot(SQLiteDialect())


@pytest.fixture(scope="session")
def customers(snapshot: SchemaSnapshot) -> TableInfo:
    return snapshot.find_table("Customers")


@pytest.fixture(scope="session")
def order_lines(snapshot: SchemaSnapshot) -> TableInfo:
    return snapshot.find_table("order_lines")


@pytest.fixture()
def catalog() -> SchemaCatalog:
    """A private catalog so tests never share cached snapshots."""
    return SchemaCatalog()
