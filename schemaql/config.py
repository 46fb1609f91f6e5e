"""Reflection configuration for SQLAlchemy-backed connection providers.

Example::

    from sqlalchemy import create_engine
    from schemaql import DataAdapter, ReflectionOptions, SQLAlchemyConnectionProvider

    engine = create_engine("mssql+pyodbc://user:pw@dsn")
    provider = SQLAlchemyConnectionProvider(
        engine,
        ReflectionOptions(schema_name="sales", include_tables=["Customers", "Orders"]),
    )
    adapter = DataAdapter(provider)
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ReflectionOptions(BaseModel):
    """Controls how a live database is turned into a SchemaSnapshot.

    Attributes:
        dialect: Registered dialect target (e.g. ``'sqlserver'``).  ``None``
            infers it from the SQLAlchemy engine.
        schema_name: Database schema to reflect (e.g. ``'dbo'``, ``'public'``).
            ``None`` uses the connection's default schema.
        include_tables: Optional allowlist of table names to reflect.  When
            ``None`` every table in the schema is reflected.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    dialect: str | None = None
    schema_name: str | None = None
    include_tables: tuple[str, ...] | None = None
