"""Microsoft SQL Server dialect."""
from __future__ import annotations

from typing import TYPE_CHECKING

from schemaql.compile.base import SQLDialect

if TYPE_CHECKING:
    from schemaql.schema.snapshot import ColumnInfo, TableInfo


class SQLServerDialect(SQLDialect):
    """Renders T-SQL for qmark drivers such as ``pyodbc``.

    Identifiers are bracket-quoted.  The inserted row is read back in the
    same batch with ``SCOPE_IDENTITY()``, which only sees identities
    generated by the current batch (unlike ``@@IDENTITY``, triggers on the
    target table cannot leak into it).
    """

    @property
    def dialect_name(self) -> str:
        return "sqlserver"

    def param_placeholder(self) -> str:
        return "?"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace("]", "]]")
        return f"[{escaped}]"

    def identity_insert(
        self,
        insert_sql: str,
        table: TableInfo,
        identity_column: ColumnInfo,
    ) -> str:
        return (
            f"{insert_sql}; SELECT * FROM {table.quoted_name} "
            f"WHERE {identity_column.quoted_name} = SCOPE_IDENTITY()"
        )
