"""Utilities for building a SchemaSnapshot from a live database.

SQLAlchemy converter
--------------------
:func:`schema_from_sqlalchemy` reflects a live database engine and returns a
:class:`~schemaql.schema.snapshot.SchemaSnapshot` quoted for a dialect.

Install the optional dependency before using this module::

    pip install "schemaql[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from schemaql import SQLiteDialect
    from schemaql.schema.converters import schema_from_sqlalchemy

    engine = create_engine("sqlite:///mydb.db")
    snapshot = schema_from_sqlalchemy(engine, SQLiteDialect())
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from schemaql.schema.snapshot import SchemaSnapshot, SchemaSnapshotBuilder

if TYPE_CHECKING:
    from sqlalchemy import Column, Engine, MetaData, Table

    from schemaql.compile.base import SQLDialect


def schema_from_sqlalchemy(
    engine: Engine,
    dialect: SQLDialect,
    *,
    include_tables: Sequence[str] | None = None,
    schema_name: str | None = None,
) -> SchemaSnapshot:
    """Build a :class:`SchemaSnapshot` by reflecting a SQLAlchemy engine.

    All tables visible to the engine (or a subset via *include_tables*) are
    reflected using SQLAlchemy's :class:`~sqlalchemy.schema.MetaData`.

    **Identity detection**

    A column is an identity column when SQLAlchemy reflected an
    ``IDENTITY`` construct for it (SQL Server, PostgreSQL ``GENERATED ... AS
    IDENTITY``, Oracle) or when it is the table's autoincrement column
    (SQLite ``INTEGER PRIMARY KEY``, PostgreSQL ``SERIAL``, MySQL
    ``AUTO_INCREMENT``).

    Args:
        engine: A connected :class:`sqlalchemy.engine.Engine` instance.
        dialect: Dialect used to quote every identifier in the snapshot.
        include_tables: Optional allowlist of table names to reflect.
        schema_name: Optional database schema name, passed directly to
            :meth:`sqlalchemy.schema.MetaData.reflect`.

    Returns:
        A fully populated :class:`SchemaSnapshot`.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
    """
    try:
        from sqlalchemy import MetaData as _MetaData
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for schema_from_sqlalchemy(). "
            'Install it with: pip install "schemaql[sqlalchemy]"'
        ) from exc

    metadata = _MetaData()
    with engine.connect() as conn:
        metadata.reflect(
            bind=conn,
            only=list(include_tables) if include_tables is not None else None,
            schema=schema_name,
        )
    return _metadata_to_snapshot(metadata, dialect)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _metadata_to_snapshot(metadata: MetaData, dialect: SQLDialect) -> SchemaSnapshot:
    """Convert a reflected :class:`~sqlalchemy.schema.MetaData` into a
    :class:`SchemaSnapshot`.

    Separated from :func:`schema_from_sqlalchemy` so it can be reused with
    a ``MetaData`` that was declared in code rather than reflected.
    """
    builder = SchemaSnapshotBuilder(dialect)
    for table in metadata.sorted_tables:
        builder.table(table.name, schema_name=table.schema)
        for col in table.columns:
            builder.column(
                col.name,
                str(col.type),
                # col.nullable is True/False for reflected columns; treat
                # an unset value (None) as nullable.
                nullable=col.nullable is not False,
                identity=_is_identity(table, col),
            )
    return builder.build()


def _is_identity(table: Table, col: Column) -> bool:
    if getattr(col, "identity", None) is not None:
        return True
    return col is table.autoincrement_column
