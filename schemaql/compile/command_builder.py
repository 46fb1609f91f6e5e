"""Statement assembly: one method per data-access verb.

``CommandBuilder`` turns a resolved :class:`TableInfo`, column/value data
and an optional translated :class:`Predicate` into a
:class:`ParameterizedStatement`.  SQL text and parameter values always
travel separately; nothing a caller supplies is interpolated into SQL.

Dialect-specific decisions (placeholder, identity retrieval) are delegated
to the injected ``SQLDialect``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from schemaql.compile.base import ParameterizedStatement, Predicate, SQLDialect
from schemaql.errors import InvalidRequestError
from schemaql.schema.snapshot import ColumnInfo, TableInfo


class CommandBuilder:
    """Builds SELECT / INSERT / UPDATE / DELETE statements for one dialect.

    Args:
        dialect: Dialect-specific rendering rules.
    """

    def __init__(self, dialect: SQLDialect) -> None:
        self._dialect = dialect

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def select_all(self, table: TableInfo) -> ParameterizedStatement:
        """``SELECT * FROM <table>``."""
        return self._statement(f"SELECT * FROM {table.quoted_name}", [], returns_rows=True)

    def select_by_criteria(
        self, table: TableInfo, predicate: Predicate | None
    ) -> ParameterizedStatement:
        """``SELECT * FROM <table> WHERE <predicate>``, or all rows when ``None``."""
        if predicate is None:
            return self.select_all(table)
        return self._statement(
            f"SELECT * FROM {table.quoted_name} WHERE {predicate.sql}",
            list(predicate.params),
            returns_rows=True,
        )

    def insert(self, table: TableInfo, data: Mapping[str, Any]) -> ParameterizedStatement:
        """``INSERT INTO <table> (<cols>) VALUES (<placeholders>)``.

        When the table has an identity column the dialect extends the
        statement so that it returns the inserted row.

        Raises:
            InvalidRequestError: If ``data`` is empty or sets the identity
                column.
            SchemaMismatchError: If a column does not exist.
        """
        columns, params = self._resolve_pairs(table, data, verb="INSERT")
        identity = table.identity_column
        if identity is not None and any(c is identity for c in columns):
            raise InvalidRequestError(
                f"Column '{identity.name}' on table '{table.name}' is assigned by "
                "the database and cannot be inserted.",
                details={"table": table.name, "column": identity.name},
            )

        column_list = ",".join(c.quoted_name for c in columns)
        value_list = ",".join(self._dialect.param_placeholder() for _ in columns)
        sql = f"INSERT INTO {table.quoted_name} ({column_list}) VALUES ({value_list})"

        if identity is None:
            return self._statement(sql, params, returns_rows=False)
        return self._statement(
            self._dialect.identity_insert(sql, table, identity), params, returns_rows=True
        )

    def update_by_criteria(
        self,
        table: TableInfo,
        data: Mapping[str, Any],
        predicate: Predicate | None,
    ) -> ParameterizedStatement:
        """``UPDATE <table> SET <col> = ?, ... WHERE <predicate>``.

        SET parameters precede predicate parameters.

        Raises:
            InvalidRequestError: If ``data`` is empty or ``predicate`` is
                missing.
            SchemaMismatchError: If a column does not exist.
        """
        columns, params = self._resolve_pairs(table, data, verb="UPDATE")
        if predicate is None:
            raise InvalidRequestError(
                f"UPDATE on table '{table.name}' requires criteria.",
                details={"table": table.name},
            )
        placeholder = self._dialect.param_placeholder()
        assignments = ", ".join(f"{c.quoted_name} = {placeholder}" for c in columns)
        return self._statement(
            f"UPDATE {table.quoted_name} SET {assignments} WHERE {predicate.sql}",
            params + list(predicate.params),
            returns_rows=False,
        )

    def delete_by_criteria(
        self, table: TableInfo, keys: Mapping[str, Any]
    ) -> ParameterizedStatement:
        """``DELETE FROM <table> WHERE (<k1> = ?) AND (<k2> = ?) ...``.

        Every key value is bound as a parameter, whatever its shape.  A
        single key renders without parentheses.

        Raises:
            InvalidRequestError: If ``keys`` is empty or names a column twice.
            SchemaMismatchError: If a key column does not exist.
        """
        if not keys:
            raise InvalidRequestError(
                f"DELETE on table '{table.name}' requires at least one key.",
                details={"table": table.name},
            )
        columns, params = self._resolve_pairs(table, keys, verb="DELETE")
        placeholder = self._dialect.param_placeholder()
        parts = [f"{c.quoted_name} = {placeholder}" for c in columns]
        where = parts[0] if len(parts) == 1 else " AND ".join(f"({p})" for p in parts)
        return self._statement(
            f"DELETE FROM {table.quoted_name} WHERE {where}",
            params,
            returns_rows=False,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_pairs(
        table: TableInfo, data: Mapping[str, Any], verb: str
    ) -> tuple[list[ColumnInfo], list[Any]]:
        """Resolve columns and collect values in one pass, keeping them paired."""
        if not data:
            raise InvalidRequestError(
                f"{verb} on table '{table.name}' requires at least one column value.",
                details={"table": table.name},
            )
        columns: list[ColumnInfo] = []
        params: list[Any] = []
        for name, value in data.items():
            column = table.find_column(name)
            if any(c is column for c in columns):
                raise InvalidRequestError(
                    f"Column '{column.name}' is given more than once.",
                    details={"table": table.name, "column": column.name},
                )
            columns.append(column)
            params.append(value)
        return columns, params

    def _statement(
        self, sql: str, params: list[Any], returns_rows: bool
    ) -> ParameterizedStatement:
        return ParameterizedStatement(
            sql=sql,
            params=params,
            returns_rows=returns_rows,
            dialect=self._dialect.dialect_name,
        )
