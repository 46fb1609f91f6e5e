"""Custom exception hierarchy for schemaQL.

All public errors inherit from SchemaQLError so callers can catch the base
class for any schemaQL-specific failure.
"""
from __future__ import annotations

from typing import Any


class SchemaQLError(Exception):
    """Base exception for all schemaQL errors.

    Args:
        message: Human-readable description.
        code: Machine-readable error code (e.g. SCHEMA_MISMATCH).
        details: Extra structured context about the failure.
    """

    code: str = "SCHEMAQL_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class SchemaMismatchError(SchemaQLError):
    """Raised when a table or column name does not resolve against the schema."""

    code = "SCHEMA_MISMATCH"

    @classmethod
    def unknown_table(cls, table: str, available: list[str]) -> SchemaMismatchError:
        return cls(
            f"Table '{table}' does not exist in the schema.",
            details={"table": table, "available_tables": available},
        )

    @classmethod
    def unknown_column(
        cls, table: str, column: str, available: list[str]
    ) -> SchemaMismatchError:
        return cls(
            f"Column '{column}' does not exist on table '{table}'.",
            details={"table": table, "column": column, "available_columns": available},
        )


class InvalidRequestError(SchemaQLError):
    """Raised when a request is structurally invalid before any SQL is issued.

    Examples are an empty column set for INSERT / UPDATE, an explicit value
    for an identity column, or an UPDATE without criteria.
    """

    code = "INVALID_REQUEST"


class InvalidCriteriaError(InvalidRequestError):
    """Raised when a criteria expression cannot be translated to SQL."""

    code = "INVALID_CRITERIA"


class ExecutionError(SchemaQLError):
    """Raised when the database driver fails to connect, execute, or read.

    The driver exception is always chained as ``__cause__``.

    Args:
        message: Human-readable description.
        sql: The statement being executed, or ``None`` when the failure
            happened while acquiring the connection.
    """

    code = "EXECUTION_FAILURE"

    def __init__(self, message: str, sql: str | None = None) -> None:
        super().__init__(message, details={"sql": sql} if sql is not None else None)
        self.sql = sql


class SchemaDefinitionError(SchemaQLError):
    """Raised when a SchemaSnapshot definition is inconsistent.

    Detected at :meth:`SchemaSnapshotBuilder.build` time, so a broken schema
    never reaches SQL generation.

    Args:
        message: Human-readable description.
        table: The table whose definition is invalid.
    """

    code = "SCHEMA_DEFINITION"

    def __init__(self, message: str, table: str | None = None) -> None:
        super().__init__(message, details={"table": table} if table else None)
        self.table = table


class DialectNotSupportedError(SchemaQLError):
    """Raised when no dialect is registered for a requested target name."""

    code = "DIALECT_NOT_SUPPORTED"
