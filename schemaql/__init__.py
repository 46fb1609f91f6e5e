"""schemaQL – schema-aware parameterized SQL for dynamic data access.

Find, insert, update and delete by logical table and column names; the
schema is discovered at runtime, criteria trees become parameterized WHERE
clauses, and result rows come back as plain dicts.

Public API
----------
``DataAdapter``
    ``find`` / ``find_all`` / ``find_single`` / ``insert`` / ``update`` /
    ``delete`` / ``raw_query`` / ``raw_execute`` against one endpoint.

``SQLAlchemyConnectionProvider`` / ``DBAPIConnectionProvider``
    Where connections and schema metadata come from.

Re-exported types
-----------------
``SchemaSnapshot``, ``TableInfo``, ``ColumnInfo``, ``SchemaCatalog``, the
criteria models, the dialects, ``CommandBuilder``, ``ExpressionTranslator``,
and all error classes.

Example::

    from sqlalchemy import create_engine
    from schemaql import Comparison, DataAdapter, SQLAlchemyConnectionProvider

    adapter = DataAdapter(SQLAlchemyConnectionProvider(create_engine(url)))
    row = adapter.insert("Customers", {"Name": "Acme", "City": "NY"})
    adapter.find("customers", Comparison(column="city", op="EQ", value="NY"))

Extensibility
-------------
New dialects can be registered via::

    from schemaql.compile.registry import DialectFactory

    @DialectFactory.register("oracle")
    class OracleDialect(SQLDialect):
        ...
"""

from __future__ import annotations

import logging

from schemaql.adapter import DataAdapter
from schemaql.compile.base import ParameterizedStatement, Predicate, SQLDialect
from schemaql.compile.command_builder import CommandBuilder
from schemaql.compile.mysql import MySQLDialect
from schemaql.compile.postgres import PostgresDialect
from schemaql.compile.registry import DialectFactory
from schemaql.compile.sqlite import SQLiteDialect
from schemaql.compile.sqlserver import SQLServerDialect
from schemaql.compile.translator import ExpressionTranslator
from schemaql.config import ReflectionOptions
from schemaql.errors import (
    DialectNotSupportedError,
    ExecutionError,
    InvalidCriteriaError,
    InvalidRequestError,
    SchemaDefinitionError,
    SchemaMismatchError,
    SchemaQLError,
)
from schemaql.execute.connection import (
    ConnectionProvider,
    DBAPIConnectionProvider,
    SQLAlchemyConnectionProvider,
)
from schemaql.execute.materializer import Record, materialize, materialize_first
from schemaql.schema.catalog import SchemaCatalog
from schemaql.schema.converters import schema_from_sqlalchemy
from schemaql.schema.criteria import (
    ColumnRef,
    Combinator,
    Comparison,
    Criteria,
    all_of,
    any_of,
    parse_criteria,
)
from schemaql.schema.expressions import CompareOp, LogicalOp
from schemaql.schema.snapshot import (
    ColumnInfo,
    SchemaSnapshot,
    SchemaSnapshotBuilder,
    TableInfo,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

# ---------------------------------------------------------------------------
# Register built-in dialects with DialectFactory
# ---------------------------------------------------------------------------

DialectFactory.register_class("sqlserver", SQLServerDialect)
DialectFactory.register_class("sqlite", SQLiteDialect)
DialectFactory.register_class("postgres", PostgresDialect)
DialectFactory.register_class("mysql", MySQLDialect)

__all__ = [
    # Orchestration
    "DataAdapter",
    # Connections
    "ConnectionProvider",
    "DBAPIConnectionProvider",
    "SQLAlchemyConnectionProvider",
    "ReflectionOptions",
    # Schema
    "SchemaCatalog",
    "SchemaSnapshot",
    "SchemaSnapshotBuilder",
    "TableInfo",
    "ColumnInfo",
    "schema_from_sqlalchemy",
    # Criteria
    "Criteria",
    "Comparison",
    "Combinator",
    "ColumnRef",
    "CompareOp",
    "LogicalOp",
    "all_of",
    "any_of",
    "parse_criteria",
    # Compilation
    "CommandBuilder",
    "ExpressionTranslator",
    "ParameterizedStatement",
    "Predicate",
    "SQLDialect",
    "DialectFactory",
    "SQLServerDialect",
    "SQLiteDialect",
    "PostgresDialect",
    "MySQLDialect",
    # Materialization
    "Record",
    "materialize",
    "materialize_first",
    # Errors
    "SchemaQLError",
    "SchemaMismatchError",
    "InvalidRequestError",
    "InvalidCriteriaError",
    "ExecutionError",
    "SchemaDefinitionError",
    "DialectNotSupportedError",
]
