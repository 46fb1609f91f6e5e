"""DataAdapter: the public data-access operations.

``DataAdapter`` is the top-level orchestrator.  For every call it

1. resolves the endpoint's SchemaSnapshot through the SchemaCatalog,
2. resolves the logical table name,
3. translates criteria with the ExpressionTranslator,
4. builds the statement with the CommandBuilder,
5. opens one connection, executes the statement, materializes rows, and
   closes the connection again, on every exit path.

All request validation happens in steps 1-4, so a bad table name, column
name or criteria tree is reported before any connection is opened.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import closing, contextmanager
from typing import Any, TypeVar

from schemaql.compile.base import ParameterizedStatement
from schemaql.compile.command_builder import CommandBuilder
from schemaql.compile.translator import ExpressionTranslator
from schemaql.errors import ExecutionError, SchemaQLError
from schemaql.execute.connection import ConnectionProvider
from schemaql.execute.materializer import Record, materialize, materialize_first
from schemaql.schema.catalog import SchemaCatalog
from schemaql.schema.criteria import Combinator, Comparison
from schemaql.schema.snapshot import SchemaSnapshot, TableInfo

logger = logging.getLogger(__name__)

_R = TypeVar("_R")

#: Accepted criteria forms: a typed tree or its plain-data equivalent.
CriteriaInput = Comparison | Combinator | Mapping[str, Any]


def _read_all(cursor: Any) -> list[Record]:
    return list(materialize(cursor))


def _read_rowcount(cursor: Any) -> int:
    return cursor.rowcount


class DataAdapter:
    """Schema-aware find / insert / update / delete against one endpoint.

    Args:
        provider: Source of connections, dialect and schema metadata.
        catalog: Snapshot cache to use; defaults to the process-wide
            :meth:`SchemaCatalog.default`.
    """

    def __init__(
        self,
        provider: ConnectionProvider,
        catalog: SchemaCatalog | None = None,
    ) -> None:
        self._provider = provider
        self._catalog = catalog or SchemaCatalog.default()
        self._translator = ExpressionTranslator(provider.dialect)
        self._builder = CommandBuilder(provider.dialect)

    @property
    def schema(self) -> SchemaSnapshot:
        """The endpoint's schema snapshot, built on first access.

        Raises:
            ExecutionError: If the schema could not be read from the database.
        """
        try:
            return self._catalog.resolve(self._provider)
        except SchemaQLError:
            raise
        except Exception as exc:
            raise ExecutionError(
                f"Could not load schema for {self._provider.description}: {exc}"
            ) from exc

    # ------------------------------------------------------------------
    # Finds
    # ------------------------------------------------------------------

    def find(self, table_name: str, criteria: CriteriaInput | None = None) -> list[Record]:
        """Return every row of ``table_name`` matching ``criteria``.

        ``None`` criteria returns all rows.
        """
        table = self._table(table_name)
        predicate = self._translator.translate(table, criteria) if criteria is not None else None
        return self._run(self._builder.select_by_criteria(table, predicate), _read_all)

    def find_all(self, table_name: str) -> list[Record]:
        """Return every row of ``table_name``."""
        return self._run(self._builder.select_all(self._table(table_name)), _read_all)

    def find_single(
        self, table_name: str, criteria: CriteriaInput | None = None
    ) -> Record | None:
        """Return the first row matching ``criteria``, or ``None``."""
        table = self._table(table_name)
        predicate = self._translator.translate(table, criteria) if criteria is not None else None
        return self._run(self._builder.select_by_criteria(table, predicate), materialize_first)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, table_name: str, data: Mapping[str, Any]) -> Record | None:
        """Insert one row.

        Returns:
            The inserted row, including its generated identity value, when
            the table has an identity column; otherwise ``None``.
        """
        statement = self._builder.insert(self._table(table_name), data)
        if statement.returns_rows:
            return self._run(statement, materialize_first, commit=True)
        self._run(statement, _read_rowcount, commit=True)
        return None

    def update(
        self,
        table_name: str,
        data: Mapping[str, Any],
        criteria: CriteriaInput,
    ) -> int:
        """Set ``data`` on every row matching ``criteria``; return the row count."""
        table = self._table(table_name)
        predicate = self._translator.translate(table, criteria) if criteria is not None else None
        statement = self._builder.update_by_criteria(table, data, predicate)
        return self._run(statement, _read_rowcount, commit=True)

    def delete(self, table_name: str, keys: Mapping[str, Any]) -> int:
        """Delete rows whose columns equal every value in ``keys``; return the count."""
        statement = self._builder.delete_by_criteria(self._table(table_name), keys)
        return self._run(statement, _read_rowcount, commit=True)

    # ------------------------------------------------------------------
    # Raw SQL
    # ------------------------------------------------------------------

    def raw_query(self, sql: str, *values: Any) -> list[Record]:
        """Run caller-written SQL and return its rows.

        ``sql`` must use the driver's positional placeholder style.
        """
        return self._run(self._raw(sql, values, returns_rows=True), _read_all)

    def raw_execute(self, sql: str, *values: Any) -> int:
        """Run caller-written SQL as a non-query; return the affected row count."""
        return self._run(self._raw(sql, values, returns_rows=False), _read_rowcount, commit=True)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _table(self, table_name: str) -> TableInfo:
        return self.schema.find_table(table_name)

    def _raw(self, sql: str, values: tuple[Any, ...], returns_rows: bool) -> ParameterizedStatement:
        return ParameterizedStatement(
            sql=sql,
            params=list(values),
            returns_rows=returns_rows,
            dialect=self._provider.dialect.dialect_name,
        )

    @contextmanager
    def _connection(self) -> Iterator[Any]:
        """Open one connection and close it on every exit path."""
        try:
            connection = self._provider.create_connection()
        except Exception as exc:
            raise ExecutionError(
                f"Could not open a connection to {self._provider.description}: {exc}"
            ) from exc
        try:
            yield connection
        finally:
            connection.close()

    def _run(
        self,
        statement: ParameterizedStatement,
        read: Callable[[Any], _R],
        *,
        commit: bool = False,
    ) -> _R:
        logger.debug(
            "Executing %s with %d parameter(s)", statement.sql, statement.parameter_count
        )
        with self._connection() as connection:
            try:
                with closing(connection.cursor()) as cursor:
                    cursor.execute(statement.sql, statement.params)
                    result = read(cursor)
                if commit:
                    connection.commit()
            except Exception as exc:
                raise ExecutionError(f"Statement failed: {exc}", sql=statement.sql) from exc
        return result
