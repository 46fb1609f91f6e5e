"""Criteria expression → SQL predicate translation.

``ExpressionTranslator`` lowers a criteria tree into a WHERE-clause fragment
plus an ordered parameter list.  Placeholders are appended strictly in
left-to-right, depth-first order, so ``params[i]`` always binds the ``i``-th
placeholder of the emitted SQL.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from schemaql.compile.base import Predicate, SQLDialect
from schemaql.errors import InvalidCriteriaError
from schemaql.schema.column_reference import ColumnReference
from schemaql.schema.criteria import ColumnRef, Combinator, Comparison, parse_criteria
from schemaql.schema.expressions import (
    LITERAL_ONLY_OPS,
    MEMBERSHIP_OPS,
    NULL_OPS,
    SQL_OPERATORS,
    CompareOp,
)
from schemaql.schema.snapshot import TableInfo

# ---------------------------------------------------------------------------
# Parameter accumulator (one per translation run)
# ---------------------------------------------------------------------------


@dataclass
class ParameterCollector:
    """Accumulates positional parameters during a single translation run."""

    placeholder: str
    params: list[Any] = field(default_factory=list)

    def add_value(self, value: Any) -> str:
        """Store a literal value and return the placeholder that binds it."""
        self.params.append(value)
        return self.placeholder


# ---------------------------------------------------------------------------
# Translator
# ---------------------------------------------------------------------------


class ExpressionTranslator:
    """Translates criteria trees for one dialect.

    Args:
        dialect: Supplies the positional placeholder.  Column quoting comes
            from the snapshot, which was quoted by the same dialect.
    """

    def __init__(self, dialect: SQLDialect) -> None:
        self._dialect = dialect

    def translate(
        self,
        table: TableInfo,
        criteria: Comparison | Combinator | Mapping[str, Any],
    ) -> Predicate:
        """Translate ``criteria`` against ``table``.

        Args:
            table: The table every referenced column must belong to.
            criteria: A typed criteria tree or its plain-data form.

        Returns:
            :class:`~schemaql.compile.base.Predicate` with ``sql`` and
            ordered ``params``.

        Raises:
            SchemaMismatchError: If a column does not exist on ``table``.
            InvalidCriteriaError: If the tree cannot be rendered.
        """
        collector = ParameterCollector(self._dialect.param_placeholder())
        sql = self._build(table, parse_criteria(criteria), collector)
        return Predicate(sql=sql, params=collector.params)

    def _build(
        self,
        table: TableInfo,
        node: Comparison | Combinator,
        collector: ParameterCollector,
    ) -> str:
        if isinstance(node, Combinator):
            left = self._build(table, node.left, collector)
            right = self._build(table, node.right, collector)
            return f"({left}) {node.op.value} ({right})"
        if isinstance(node, Comparison):
            return self._build_comparison(table, node, collector)
        raise InvalidCriteriaError(f"Unknown criteria node: {type(node).__name__}")

    # ------------------------------------------------------------------
    # Comparison leaves
    # ------------------------------------------------------------------

    def _build_comparison(
        self,
        table: TableInfo,
        node: Comparison,
        collector: ParameterCollector,
    ) -> str:
        column = ColumnReference.resolve(node.column, table).quoted_name
        op = node.op
        value = node.value

        if op in NULL_OPS:
            return f"{column} {'IS NULL' if op is CompareOp.IS_NULL else 'IS NOT NULL'}"

        if isinstance(value, ColumnRef) and op in LITERAL_ONLY_OPS:
            raise InvalidCriteriaError(
                f"{op.value} on '{node.column}' requires literal values, not a column.",
                details={"column": node.column, "op": op.value},
            )

        if op in MEMBERSHIP_OPS:
            return self._build_in(column, node, collector)

        if value is None:
            if op is CompareOp.EQ:
                return f"{column} IS NULL"
            if op is CompareOp.NE:
                return f"{column} IS NOT NULL"
            raise InvalidCriteriaError(
                f"{op.value} on '{node.column}' cannot compare against NULL.",
                details={"column": node.column, "op": op.value},
            )

        if isinstance(value, ColumnRef):
            right = ColumnReference.resolve(value.col, table).quoted_name
        else:
            right = collector.add_value(value)
        return f"{column} {SQL_OPERATORS[op]} {right}"

    @staticmethod
    def _build_in(column: str, node: Comparison, collector: ParameterCollector) -> str:
        values = node.value
        if not isinstance(values, (list, tuple)):
            raise InvalidCriteriaError(
                f"IN on '{node.column}' requires a list of values.",
                details={"column": node.column, "value": values},
            )
        if not values:
            raise InvalidCriteriaError(
                f"IN on '{node.column}' has an empty value list.",
                details={"column": node.column},
            )
        placeholders = ",".join(collector.add_value(v) for v in values)
        return f"{column} IN ({placeholders})"
