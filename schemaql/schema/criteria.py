"""Typed criteria-expression tree.

A criteria expression is a binary tree: :class:`Comparison` leaves joined
by :class:`Combinator` nodes.  All nodes are frozen Pydantic models, so a
tree can be parsed straight from JSON and is immutable afterwards.

Usage::

    from schemaql.schema.criteria import Combinator, Comparison

    # City = 'NY' AND Name <> 'Acme'
    criteria = Combinator(
        op="AND",
        left=Comparison(column="City", op="EQ", value="NY"),
        right=Comparison(column="Name", op="NE", value="Acme"),
    )

    # The same tree from plain data
    criteria = parse_criteria({
        "op": "AND",
        "left": {"column": "City", "op": "EQ", "value": "NY"},
        "right": {"column": "Name", "op": "NE", "value": "Acme"},
    })

Grouping is encoded only by tree shape; the translator parenthesizes every
combinator operand, so ``OR`` nested under ``AND`` keeps its meaning.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Tag,
    TypeAdapter,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

from schemaql.errors import InvalidCriteriaError
from schemaql.schema.expressions import CompareOp, LogicalOp

_FROZEN = ConfigDict(extra="forbid", frozen=True)


class ColumnRef(BaseModel):
    """A reference to another column of the same table: ``{"col": "Name"}``."""

    model_config = _FROZEN

    col: str


class Comparison(BaseModel):
    """A comparison leaf: ``<column> <op> <value>``.

    Attributes:
        column: Logical column name, optionally ``Table.column`` qualified.
        op: The comparison operator.
        value: A literal, a list of literals for ``IN``, a :class:`ColumnRef`,
            or ``None`` (ignored by ``IS_NULL`` / ``IS_NOT_NULL``).
    """

    model_config = _FROZEN

    column: str
    op: CompareOp
    value: Any = None

    @field_validator("value", mode="before")
    @classmethod
    def _normalize_value(cls, value: Any) -> Any:
        """Turn ``{"col": ...}`` into :class:`ColumnRef` and lists into tuples."""
        if isinstance(value, dict) and set(value) == {"col"}:
            return ColumnRef(col=value["col"])
        if isinstance(value, list):
            return tuple(value)
        return value


class Combinator(BaseModel):
    """Two criteria joined by ``AND`` / ``OR``."""

    model_config = _FROZEN

    op: LogicalOp
    left: Criteria
    right: Criteria


# ---------------------------------------------------------------------------
# Discriminated union
# ---------------------------------------------------------------------------


def _criteria_discriminator(v: Any) -> str | None:
    """Return the tag for the Pydantic discriminated union."""
    if isinstance(v, Comparison):
        return "comparison"
    if isinstance(v, Combinator):
        return "combinator"
    if isinstance(v, Mapping):
        if "left" in v or "right" in v:
            return "combinator"
        if "column" in v:
            return "comparison"
    return None


Criteria = Annotated[
    Annotated[Comparison, Tag("comparison")] | Annotated[Combinator, Tag("combinator")],
    Discriminator(_criteria_discriminator),
]

# Resolve the forward reference in the recursive Combinator type.
Combinator.model_rebuild()

#: Parse raw data into a typed criteria tree.
CRITERIA_ADAPTER: TypeAdapter[Criteria] = TypeAdapter(Criteria)


def parse_criteria(data: Mapping[str, Any] | Comparison | Combinator) -> Comparison | Combinator:
    """Convert plain data to a typed criteria tree, or return a tree as-is.

    Raises:
        InvalidCriteriaError: If ``data`` is not a well-formed tree.
    """
    if isinstance(data, (Comparison, Combinator)):
        return data
    try:
        return CRITERIA_ADAPTER.validate_python(data)
    except PydanticValidationError as exc:
        raise InvalidCriteriaError(
            f"Criteria structure is invalid: {exc}", details={"criteria": data}
        ) from exc


def all_of(*criteria: Comparison | Combinator) -> Comparison | Combinator:
    """Fold criteria into a left-deep ``AND`` chain."""
    return _fold(LogicalOp.AND, criteria)


def any_of(*criteria: Comparison | Combinator) -> Comparison | Combinator:
    """Fold criteria into a left-deep ``OR`` chain."""
    return _fold(LogicalOp.OR, criteria)


def _fold(op: LogicalOp, criteria: tuple[Comparison | Combinator, ...]) -> Comparison | Combinator:
    if not criteria:
        raise InvalidCriteriaError(f"{op.value} needs at least one criterion.")
    result = criteria[0]
    for nxt in criteria[1:]:
        result = Combinator(op=op, left=result, right=nxt)
    return result
