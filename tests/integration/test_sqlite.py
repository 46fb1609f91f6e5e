"""Integration tests: DataAdapter against a real SQLite database file.

Runs every adapter operation through both connection providers: the
SQLAlchemy engine provider (schema reflected from the database) and the
plain ``sqlite3`` DB-API provider (schema from the JSON definition).
"""
from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest
from sqlalchemy import create_engine

from schemaql import (
    Combinator,
    Comparison,
    DataAdapter,
    DBAPIConnectionProvider,
    ReflectionOptions,
    SchemaCatalog,
    SQLAlchemyConnectionProvider,
)
from schemaql.errors import ExecutionError, InvalidRequestError, SchemaMismatchError
from tests.fixtures import load_ddl, load_schema_snapshot

SEED_CUSTOMERS = [("Acme", "NY"), ("Bolt", "LA"), ("Coil", "NY"), ("Dyne", None)]


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "shop.db"
    conn = sqlite3.connect(path)
    conn.executescript(load_ddl("sqlite"))
    conn.executemany("INSERT INTO Customers (Name, City) VALUES (?, ?)", SEED_CUSTOMERS)
    conn.executemany(
        "INSERT INTO Orders (CustomerId, Total, PlacedOn, Note) VALUES (?, ?, ?, ?)",
        [(1, 99.5, "2024-01-05", None), (1, 10.0, "2024-02-01", "gift"), (3, 42.0, None, "")],
    )
    conn.executemany(
        "INSERT INTO order_lines (order_id, line_no, sku, qty) VALUES (?, ?, ?, ?)",
        [(1, 1, "A-1", 2), (1, 2, "B-7", 1), (2, 1, "A-1", 5)],
    )
    conn.commit()
    conn.close()
    return path


@pytest.fixture(params=["sqlalchemy", "dbapi"])
def adapter(request, db_path: Path) -> DataAdapter:
    if request.param == "sqlalchemy":
        engine = create_engine(f"sqlite:///{db_path}")
        request.addfinalizer(engine.dispose)
        provider = SQLAlchemyConnectionProvider(engine)
    else:
        provider = DBAPIConnectionProvider(
            connect=lambda: sqlite3.connect(db_path),
            endpoint_identity=f"sqlite:{db_path}",
            dialect="sqlite",
            schema_loader=lambda p: load_schema_snapshot(p.dialect),
        )
    return DataAdapter(provider, SchemaCatalog())


# ---------------------------------------------------------------------------
# Finds
# ---------------------------------------------------------------------------


def test_find_all(adapter):
    rows = adapter.find_all("customers")
    assert [r["Name"] for r in rows] == ["Acme", "Bolt", "Coil", "Dyne"]
    assert list(rows[0]) == ["Id", "Name", "City"]


def test_find_and_criteria(adapter):
    criteria = Combinator(
        op="AND",
        left=Comparison(column="City", op="EQ", value="NY"),
        right=Comparison(column="Name", op="NE", value="Acme"),
    )
    assert adapter.find("Customers", criteria) == [{"Id": 3, "Name": "Coil", "City": "NY"}]


def test_find_is_null(adapter):
    rows = adapter.find("Customers", {"column": "City", "op": "IS_NULL"})
    assert [r["Name"] for r in rows] == ["Dyne"]


def test_find_in_list(adapter):
    rows = adapter.find("Customers", Comparison(column="Id", op="IN", value=[2, 4]))
    assert [r["Id"] for r in rows] == [2, 4]


def test_find_like(adapter):
    rows = adapter.find("Customers", Comparison(column="Name", op="LIKE", value="%o%"))
    assert {r["Name"] for r in rows} == {"Bolt", "Coil"}


def test_find_column_to_column(adapter):
    rows = adapter.find(
        "order_lines", Comparison(column="line_no", op="LT", value={"col": "qty"})
    )
    assert [(r["order_id"], r["line_no"]) for r in rows] == [(1, 1), (2, 1)]


def test_values_come_back_unconverted(adapter):
    row = adapter.find_single("Orders", Comparison(column="OrderId", op="EQ", value=3))
    assert row == {"OrderId": 3, "CustomerId": 3, "Total": 42.0, "PlacedOn": None, "Note": ""}


def test_find_single_no_match(adapter):
    assert adapter.find_single("Customers", Comparison(column="Id", op="EQ", value=99)) is None


def test_injection_attempt_is_bound_as_value(adapter):
    rows = adapter.find("Customers", Comparison(column="Name", op="EQ", value="x' OR '1'='1"))
    assert rows == []
    assert len(adapter.find_all("Customers")) == 4


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def test_insert_returns_generated_identity(adapter):
    row = adapter.insert("Customers", {"Name": "Eon", "City": "SF"})
    assert row == {"Id": 5, "Name": "Eon", "City": "SF"}
    found = adapter.find_single("Customers", Comparison(column="Id", op="EQ", value=row["Id"]))
    assert found == row


def test_insert_integer_primary_key_identity(adapter):
    row = adapter.insert("Orders", {"CustomerId": 2, "Total": 7.25})
    assert row["OrderId"] == 4
    assert row["Note"] is None


def test_insert_without_identity(adapter):
    data = {"order_id": 3, "line_no": 1, "sku": "Z-9", "qty": 4}
    assert adapter.insert("order_lines", data) is None
    assert adapter.find("order_lines", Comparison(column="order_id", op="EQ", value=3)) == [data]


def test_insert_rejects_identity_value(adapter):
    with pytest.raises(InvalidRequestError):
        adapter.insert("Customers", {"Id": 100, "Name": "Nope"})


def test_constraint_violation_is_execution_error(adapter):
    with pytest.raises(ExecutionError) as exc_info:
        adapter.insert("Customers", {"City": "Nowhere"})
    assert isinstance(exc_info.value.__cause__, sqlite3.IntegrityError)


def test_update_returns_affected_rows(adapter):
    count = adapter.update(
        "Customers", {"City": "Boston"}, Comparison(column="City", op="EQ", value="NY")
    )
    assert count == 2
    rows = adapter.find("Customers", Comparison(column="City", op="EQ", value="Boston"))
    assert [r["Name"] for r in rows] == ["Acme", "Coil"]


def test_update_set_null(adapter):
    adapter.update("Orders", {"Note": None}, {"column": "OrderId", "op": "EQ", "value": 2})
    row = adapter.find_single("Orders", Comparison(column="OrderId", op="EQ", value=2))
    assert row["Note"] is None


def test_delete_composite_key(adapter):
    assert adapter.delete("order_lines", {"order_id": 1, "line_no": 2}) == 1
    remaining = adapter.find("order_lines", Comparison(column="order_id", op="EQ", value=1))
    assert [r["line_no"] for r in remaining] == [1]


def test_delete_no_match(adapter):
    assert adapter.delete("Customers", {"Id": 999}) == 0


def test_writes_are_committed(adapter, db_path):
    adapter.insert("Customers", {"Name": "Kept", "City": "Oslo"})
    conn = sqlite3.connect(db_path)
    try:
        assert conn.execute("SELECT COUNT(*) FROM Customers WHERE Name = 'Kept'").fetchone() == (1,)
    finally:
        conn.close()


# ---------------------------------------------------------------------------
# Raw SQL
# ---------------------------------------------------------------------------


def test_raw_query(adapter):
    rows = adapter.raw_query(
        "SELECT City, COUNT(*) AS n FROM Customers WHERE City IS NOT NULL "
        "GROUP BY City ORDER BY City"
    )
    assert rows == [{"City": "LA", "n": 1}, {"City": "NY", "n": 2}]


def test_raw_execute(adapter):
    assert adapter.raw_execute("UPDATE order_lines SET qty = qty + ? WHERE sku = ?", 1, "A-1") == 2


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


def test_unknown_table(adapter):
    with pytest.raises(SchemaMismatchError):
        adapter.find_all("Invoices")


def test_reflection_options_filter_tables(db_path):
    engine = create_engine(f"sqlite:///{db_path}")
    try:
        provider = SQLAlchemyConnectionProvider(
            engine, ReflectionOptions(include_tables=("Customers",))
        )
        adapter = DataAdapter(provider, SchemaCatalog())
        assert adapter.schema.table_names == ["Customers"]
        with pytest.raises(SchemaMismatchError):
            adapter.find_all("Orders")
    finally:
        engine.dispose()


def test_sqlalchemy_provider_identity(tmp_path):
    engine = create_engine("sqlite:///" + str(tmp_path / "x.db"))
    try:
        provider = SQLAlchemyConnectionProvider(engine)
        assert provider.dialect.dialect_name == "sqlite"
        assert provider.endpoint_identity == (str(engine.url), None)
        assert provider.description == str(engine.url)
    finally:
        engine.dispose()


def test_unreachable_database_is_execution_error(tmp_path):
    engine = create_engine("sqlite:///" + str(tmp_path / "missing" / "dir" / "x.db"))
    try:
        adapter = DataAdapter(SQLAlchemyConnectionProvider(engine), SchemaCatalog())
        with pytest.raises(ExecutionError) as exc_info:
            adapter.find_all("Customers")
        assert "Could not load schema" in str(exc_info.value)
        assert exc_info.value.__cause__ is not None
    finally:
        engine.dispose()
