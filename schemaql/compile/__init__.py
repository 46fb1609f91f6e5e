"""schemaQL compilation layer: criteria and data → parameterized SQL."""
from schemaql.compile.base import ParameterizedStatement, Predicate, SQLDialect
from schemaql.compile.command_builder import CommandBuilder
from schemaql.compile.mysql import MySQLDialect
from schemaql.compile.postgres import PostgresDialect
from schemaql.compile.registry import DialectFactory
from schemaql.compile.sqlite import SQLiteDialect
from schemaql.compile.sqlserver import SQLServerDialect
from schemaql.compile.translator import ExpressionTranslator

__all__ = [
    "ParameterizedStatement",
    "Predicate",
    "SQLDialect",
    "CommandBuilder",
    "DialectFactory",
    "ExpressionTranslator",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "SQLServerDialect",
]
