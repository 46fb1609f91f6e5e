"""PostgreSQL dialect."""

from __future__ import annotations

from typing import TYPE_CHECKING

from schemaql.compile.base import SQLDialect

if TYPE_CHECKING:
    from schemaql.schema.snapshot import ColumnInfo, TableInfo


class PostgresDialect(SQLDialect):
    """Renders PostgreSQL SQL.

    Parameter style: ``%s`` – compatible with ``psycopg2`` and ``psycopg``
    positional execution.  Identity columns (``SERIAL`` / ``GENERATED ...
    AS IDENTITY``) are read back with ``RETURNING *``.
    """

    @property
    def dialect_name(self) -> str:
        return "postgres"

    def param_placeholder(self) -> str:
        return "%s"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace('"', '""')
        return f'"{escaped}"'

    def identity_insert(
        self,
        insert_sql: str,
        table: TableInfo,
        identity_column: ColumnInfo,
    ) -> str:
        return f"{insert_sql} RETURNING *"
