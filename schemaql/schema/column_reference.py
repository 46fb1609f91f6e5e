"""Typed column-reference class.

Owns the parsing of ``Table.column`` / bare ``column`` references used in
criteria, and their resolution against a :class:`TableInfo`.
"""

from __future__ import annotations

from dataclasses import dataclass

from schemaql.errors import SchemaMismatchError
from schemaql.schema.snapshot import ColumnInfo, TableInfo


@dataclass(frozen=True)
class ColumnReference:
    """A parsed ``table.column`` or bare ``column`` reference.

    Attributes:
        table: Table qualifier, or ``None`` for unqualified references.
        column: Column name.
    """

    table: str | None
    column: str

    @classmethod
    def parse(cls, ref: str) -> ColumnReference:
        """Parse a ``"table.column"`` or bare ``"column"`` string.

        The qualifier is everything before the last dot, so
        ``"dbo.Customers.Name"`` keeps ``"dbo.Customers"`` as its table.
        """
        if "." in ref:
            table, column = ref.rsplit(".", 1)
            return cls(table=table, column=column)
        return cls(table=None, column=ref)

    @classmethod
    def resolve(cls, ref: str, table: TableInfo) -> ColumnInfo:
        """Resolve ``ref`` to a column of ``table``.

        A column whose actual name contains a dot is matched literally
        before the reference is parsed.

        Raises:
            SchemaMismatchError: If the qualifier names another table or the
                column does not exist.
        """
        col = table.get_column(ref)
        if col is not None:
            return col
        return cls.parse(ref).resolve_against(table)

    def resolve_against(self, table: TableInfo) -> ColumnInfo:
        """Return the :class:`ColumnInfo` this reference names on ``table``.

        Raises:
            SchemaMismatchError: On qualifier mismatch or unknown column.
        """
        if self.table is not None and not self._qualifies(table):
            raise SchemaMismatchError(
                f"Column reference '{self}' does not belong to table '{table.name}'.",
                details={"table": table.name, "reference": str(self)},
            )
        return table.find_column(self.column)

    def _qualifies(self, table: TableInfo) -> bool:
        qualifier = (self.table or "").casefold()
        candidates = [table.name]
        if table.schema_name:
            candidates.append(f"{table.schema_name}.{table.name}")
        return any(c.casefold() == qualifier for c in candidates)

    @property
    def qualified(self) -> bool:
        """True when the reference includes a table qualifier."""
        return self.table is not None

    def __str__(self) -> str:
        if self.table:
            return f"{self.table}.{self.column}"
        return self.column
