"""SQLite dialect."""
from __future__ import annotations

from typing import TYPE_CHECKING

from schemaql.compile.base import SQLDialect

if TYPE_CHECKING:
    from schemaql.schema.snapshot import ColumnInfo, TableInfo


class SQLiteDialect(SQLDialect):
    """Renders SQLite SQL for Python's built-in ``sqlite3`` module.

    Parameter style: ``?`` (qmark).  The inserted row is returned with
    ``RETURNING *`` (SQLite 3.35+), so the insert and the identity read are
    one statement; ``sqlite3`` refuses multi-statement strings in
    ``execute``.
    """

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    def param_placeholder(self) -> str:
        return "?"

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
