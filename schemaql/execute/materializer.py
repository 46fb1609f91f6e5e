"""DB-API result rows → generic records.

A record is a ``dict`` mapping column name to the value exactly as the
driver returned it; key order follows ``cursor.description``.
"""
from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Protocol

#: One materialized result row.
Record = dict[str, Any]


class ResultCursor(Protocol):
    """The subset of a DB-API 2.0 cursor the materializer reads."""

    @property
    def description(self) -> Any: ...

    def fetchone(self) -> Any: ...


def _column_names(cursor: ResultCursor) -> list[str] | None:
    """Return the result column names, skipping row-less result sets.

    Batches such as ``INSERT ...; SELECT ...`` first report the INSERT's row
    count, which has no ``description``.  Drivers that support multiple
    result sets expose ``nextset()``; it is called until a result set with
    columns appears.
    """
    while cursor.description is None:
        nextset = getattr(cursor, "nextset", None)
        if nextset is None or not nextset():
            return None
    return [col[0] for col in cursor.description]


def materialize(cursor: ResultCursor) -> Iterator[Record]:
    """Yield one record per remaining row of ``cursor``.

    The iterator is lazy and single-pass; it must be consumed before the
    cursor's connection is closed.
    """
    names = _column_names(cursor)
    if names is None:
        return
    while True:
        row = cursor.fetchone()
        if row is None:
            return
        yield dict(zip(names, row))


def materialize_first(cursor: ResultCursor) -> Record | None:
    """Return the first row as a record, or ``None`` for an empty result.

    Reads at most one row from ``cursor``.
    """
    return next(materialize(cursor), None)
