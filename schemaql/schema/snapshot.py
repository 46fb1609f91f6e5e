"""Pydantic models for the SchemaSnapshot used to resolve logical names.

A SchemaSnapshot describes every table and column of one database endpoint
as discovered at runtime.  It is immutable once built: quoted identifiers
are computed by the dialect exactly once, inside
:meth:`SchemaSnapshotBuilder.build`, and the same ``TableInfo`` /
``ColumnInfo`` instances are returned by every lookup.

Create a snapshot through the builder::

    from schemaql import SchemaSnapshot, SQLServerDialect

    snapshot = (
        SchemaSnapshot.builder(SQLServerDialect())
        .table("Customers")
        .column("Id", "int", nullable=False, identity=True)
        .column("Name", "nvarchar")
        .column("City", "nvarchar")
        .build()
    )
    snapshot.find_table("customers").quoted_name   # '[Customers]'
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ConfigDict

from schemaql.errors import SchemaDefinitionError, SchemaMismatchError

if TYPE_CHECKING:
    from schemaql.compile.base import SQLDialect

_T = TypeVar("_T")

_FROZEN = ConfigDict(extra="forbid", frozen=True)


def _match_name(items: Sequence[_T], name: str, key: Callable[[_T], str]) -> _T | None:
    """Return the item whose ``key`` equals ``name``, ignoring case.

    An exact-case match wins over a case-insensitive one so that databases
    with case-sensitive identifiers still resolve deterministically.
    """
    folded = name.casefold()
    fallback: _T | None = None
    for item in items:
        item_name = key(item)
        if item_name == name:
            return item
        if fallback is None and item_name.casefold() == folded:
            fallback = item
    return fallback


class ColumnInfo(BaseModel):
    """Metadata for a single column.

    Attributes:
        name: Actual column name as reported by the database.
        quoted_name: Dialect-quoted identifier (e.g. ``'[Name]'``).
        type: SQL type string (e.g. ``'INTEGER'``, ``'NVARCHAR(50)'``).
        nullable: Whether the column can be NULL.
        is_identity: Whether the database assigns the value on INSERT.
    """

    model_config = _FROZEN

    name: str
    quoted_name: str
    type: str = ""
    nullable: bool = True
    is_identity: bool = False


class TableInfo(BaseModel):
    """Metadata for a single table.

    Attributes:
        name: Actual (case-correct) table name.
        quoted_name: Dialect-quoted, schema-qualified identifier.
        schema_name: Owning schema, or ``None`` for the default schema.
        columns: Columns in database ordinal order.
    """

    model_config = _FROZEN

    name: str
    quoted_name: str
    schema_name: str | None = None
    columns: tuple[ColumnInfo, ...] = ()

    @property
    def column_names(self) -> list[str]:
        """Returns all column names for this table."""
        return [c.name for c in self.columns]

    @property
    def identity_column(self) -> ColumnInfo | None:
        """Returns the identity column, or ``None`` if the table has none."""
        for col in self.columns:
            if col.is_identity:
                return col
        return None

    def get_column(self, name: str) -> ColumnInfo | None:
        """Returns the ColumnInfo for ``name`` (case-insensitive), or ``None``."""
        return _match_name(self.columns, name, lambda c: c.name)

    def find_column(self, name: str) -> ColumnInfo:
        """Resolve a logical column name.

        Raises:
            SchemaMismatchError: If no column matches ``name``.
        """
        col = self.get_column(name)
        if col is None:
            raise SchemaMismatchError.unknown_column(self.name, name, self.column_names)
        return col


class SchemaSnapshot(BaseModel):
    """All tables of one database endpoint.

    Attributes:
        dialect: Name of the dialect used to quote identifiers.
        tables: Every table discovered on the endpoint.
    """

    model_config = _FROZEN

    dialect: str
    tables: tuple[TableInfo, ...] = ()

    @classmethod
    def builder(cls, dialect: SQLDialect) -> SchemaSnapshotBuilder:
        """Return a :class:`SchemaSnapshotBuilder` quoting with ``dialect``."""
        return SchemaSnapshotBuilder(dialect)

    @classmethod
    def from_definition(
        cls, data: Mapping[str, Any], dialect: SQLDialect
    ) -> SchemaSnapshot:
        """Build a snapshot from a plain ``{"tables": [...]}`` definition.

        Each table entry has ``name``, optional ``schema`` and a ``columns``
        list whose entries carry ``name`` and optional ``type``,
        ``nullable`` and ``identity`` keys.
        """
        builder = SchemaSnapshotBuilder(dialect)
        for table in data.get("tables", []):
            builder.add_table(
                table["name"],
                table.get("columns", []),
                schema_name=table.get("schema"),
            )
        return builder.build()

    def get_table(self, name: str) -> TableInfo | None:
        """Returns the TableInfo for ``name`` (case-insensitive), or ``None``.

        ``schema.table`` names are accepted when no table is literally
        called ``name``.
        """
        table = _match_name(self.tables, name, lambda t: t.name)
        if table is None and "." in name:
            qualified = [t for t in self.tables if t.schema_name is not None]
            table = _match_name(qualified, name, lambda t: f"{t.schema_name}.{t.name}")
        return table

    def find_table(self, name: str) -> TableInfo:
        """Resolve a logical table name.

        Raises:
            SchemaMismatchError: If no table matches ``name``.
        """
        table = self.get_table(name)
        if table is None:
            raise SchemaMismatchError.unknown_table(name, self.table_names)
        return table

    @property
    def table_names(self) -> list[str]:
        """Returns all table names in the snapshot."""
        return [t.name for t in self.tables]


@dataclass
class _TableDraft:
    name: str
    schema_name: str | None
    columns: list[dict[str, Any]] = field(default_factory=list)


class SchemaSnapshotBuilder:
    """Fluent builder for :class:`SchemaSnapshot`.

    Always obtained via :meth:`SchemaSnapshot.builder`.  ``column()`` adds
    to the most recently declared ``table()``.
    """

    def __init__(self, dialect: SQLDialect) -> None:
        self._dialect = dialect
        self._tables: list[_TableDraft] = []

    def table(self, name: str, *, schema_name: str | None = None) -> SchemaSnapshotBuilder:
        """Start a new table definition."""
        self._tables.append(_TableDraft(name=name, schema_name=schema_name))
        return self

    def column(
        self,
        name: str,
        type: str = "",
        *,
        nullable: bool = True,
        identity: bool = False,
    ) -> SchemaSnapshotBuilder:
        """Add a column to the current table.

        Raises:
            SchemaDefinitionError: If no table has been declared yet.
        """
        if not self._tables:
            raise SchemaDefinitionError(
                f"Column '{name}' declared before any table. Call .table() first."
            )
        self._tables[-1].columns.append(
            {"name": name, "type": type, "nullable": nullable, "identity": identity}
        )
        return self

    def add_table(
        self,
        name: str,
        columns: Iterable[Mapping[str, Any]],
        *,
        schema_name: str | None = None,
    ) -> SchemaSnapshotBuilder:
        """Add a table with all its columns in one call."""
        self.table(name, schema_name=schema_name)
        for col in columns:
            self.column(
                col["name"],
                col.get("type", ""),
                nullable=col.get("nullable", True),
                identity=col.get("identity", False),
            )
        return self

    def build(self) -> SchemaSnapshot:
        """Validate the definitions and return the immutable snapshot.

        Raises:
            SchemaDefinitionError: On duplicate tables, duplicate column
                names within a table, or more than one identity column.
        """
        seen: set[tuple[str | None, str]] = set()
        tables: list[TableInfo] = []
        for draft in self._tables:
            key = (draft.schema_name, draft.name)
            if key in seen:
                raise SchemaDefinitionError(
                    f"Table '{draft.name}' is defined more than once.", table=draft.name
                )
            seen.add(key)
            tables.append(self._build_table(draft))
        return SchemaSnapshot(dialect=self._dialect.dialect_name, tables=tuple(tables))

    def _build_table(self, draft: _TableDraft) -> TableInfo:
        quote = self._dialect.quote_identifier
        names: set[str] = set()
        columns: list[ColumnInfo] = []
        for col in draft.columns:
            folded = col["name"].casefold()
            if folded in names:
                raise SchemaDefinitionError(
                    f"Column '{col['name']}' is defined more than once on table "
                    f"'{draft.name}'.",
                    table=draft.name,
                )
            names.add(folded)
            columns.append(
                ColumnInfo(
                    name=col["name"],
                    quoted_name=quote(col["name"]),
                    type=col["type"],
                    nullable=col["nullable"],
                    is_identity=col["identity"],
                )
            )

        identities = [c.name for c in columns if c.is_identity]
        if len(identities) > 1:
            raise SchemaDefinitionError(
                f"Table '{draft.name}' declares more than one identity column: "
                f"{identities}.",
                table=draft.name,
            )

        return TableInfo(
            name=draft.name,
            quoted_name=self._dialect.quote_table(draft.name, draft.schema_name),
            schema_name=draft.schema_name,
            columns=tuple(columns),
        )
