"""Compiler abstractions: statement value objects and the SQLDialect ABC.

The Strategy pattern (GoF) is used:
- ``SQLDialect`` defines every database-specific decision the builders need
  (identifier quoting, placeholder style, identity retrieval after INSERT).
- ``SQLServerDialect``, ``SQLiteDialect``, ``PostgresDialect`` and
  ``MySQLDialect`` implement it; ``ExpressionTranslator`` and
  ``CommandBuilder`` stay dialect-agnostic.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from schemaql.schema.snapshot import ColumnInfo, TableInfo


@dataclass(frozen=True)
class Predicate:
    """A translated WHERE-clause fragment.

    Attributes:
        sql: Predicate SQL with positional placeholders.
        params: Values index-aligned with the placeholders in ``sql``.
    """

    sql: str
    params: list[Any] = field(default_factory=list)


@dataclass
class ParameterizedStatement:
    """A complete statement ready for ``cursor.execute(sql, params)``.

    Attributes:
        sql: SQL text with positional placeholders.  Literal values are
            never interpolated into it.
        params: Values index-aligned with placeholder occurrence order.
        returns_rows: ``True`` when executing the statement yields a result
            set (SELECT, identity-retrieving INSERT).
        dialect: Name of the dialect the statement was built for.
    """

    sql: str
    params: list[Any]
    returns_rows: bool
    dialect: str

    @property
    def parameter_count(self) -> int:
        return len(self.params)


class SQLDialect(ABC):
    """Abstract base for database-specific SQL rendering rules."""

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (e.g. ``'sqlserver'``)."""

    @abstractmethod
    def param_placeholder(self) -> str:
        """Return the positional placeholder for the target driver.

        Returns:
            ``'?'`` for qmark drivers, ``'%s'`` for format drivers.
        """

    @abstractmethod
    def quote_identifier(self, name: str) -> str:
        """Return a properly-quoted SQL identifier.

        Args:
            name: Unquoted identifier (table, schema or column name).

        Returns:
            Quoted identifier with embedded quote characters escaped.
        """

    @abstractmethod
    def identity_insert(
        self,
        insert_sql: str,
        table: TableInfo,
        identity_column: ColumnInfo,
    ) -> str:
        """Extend an INSERT so it also returns the newly inserted row.

        Args:
            insert_sql: The complete ``INSERT INTO ... VALUES (...)`` text.
            table: Target table.
            identity_column: The table's database-assigned column.

        Returns:
            A single statement string whose execution yields the inserted
            row as a result set.  Only the INSERT's placeholders may appear
            in it.
        """

    def quote_table(self, name: str, schema_name: str | None = None) -> str:
        """Return the quoted, optionally schema-qualified, table identifier."""
        if schema_name:
            return f"{self.quote_identifier(schema_name)}.{self.quote_identifier(name)}"
        return self.quote_identifier(name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
