"""Operator enums and groups for criteria expressions.

Both the criteria models and the translator import from here so the set of
supported operators is defined exactly once.
"""

from __future__ import annotations

from enum import Enum

# ---------------------------------------------------------------------------
# Operator enums
# ---------------------------------------------------------------------------


class CompareOp(str, Enum):
    """Operators allowed on a comparison leaf."""

    EQ = "EQ"
    NE = "NE"
    GT = "GT"
    GTE = "GTE"
    LT = "LT"
    LTE = "LTE"
    LIKE = "LIKE"
    IN = "IN"
    IS_NULL = "IS_NULL"
    IS_NOT_NULL = "IS_NOT_NULL"


class LogicalOp(str, Enum):
    """Boolean connectives joining two criteria."""

    AND = "AND"
    OR = "OR"


# ---------------------------------------------------------------------------
# Operator groups
# ---------------------------------------------------------------------------

#: Operators whose right-hand side is a list of literals.
MEMBERSHIP_OPS: frozenset[CompareOp] = frozenset({CompareOp.IN})

#: Operators that take no value at all.
NULL_OPS: frozenset[CompareOp] = frozenset({CompareOp.IS_NULL, CompareOp.IS_NOT_NULL})

#: Operators whose right-hand side must be a literal, never a column.
LITERAL_ONLY_OPS: frozenset[CompareOp] = frozenset({CompareOp.LIKE, CompareOp.IN})

#: SQL text for every binary operator.
SQL_OPERATORS: dict[CompareOp, str] = {
    CompareOp.EQ: "=",
    CompareOp.NE: "<>",
    CompareOp.GT: ">",
    CompareOp.GTE: ">=",
    CompareOp.LT: "<",
    CompareOp.LTE: "<=",
    CompareOp.LIKE: "LIKE",
}
