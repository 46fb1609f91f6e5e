"""Test fixtures: sample schema DDL and schema definition JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

from schemaql.compile.base import SQLDialect
from schemaql.compile.sqlserver import SQLServerDialect
from schemaql.schema.snapshot import SchemaSnapshot

_FIXTURES_DIR = Path(__file__).parent


def load_schema_definition() -> dict[str, Any]:
    """Load the canonical sample schema definition from schema.json."""
    return json.loads((_FIXTURES_DIR / "schema.json").read_text())


def load_schema_snapshot(dialect: SQLDialect | None = None) -> SchemaSnapshot:
    """Build the canonical SchemaSnapshot, quoted for ``dialect``.

    Defaults to SQL Server so identifiers are bracket-quoted.
    """
    return SchemaSnapshot.from_definition(
        load_schema_definition(), dialect or SQLServerDialect()
    )


def load_ddl(target: Literal["sqlite"] = "sqlite") -> str:
    """Return the sample DDL SQL string for the given backend."""
    filename = f"ddl_{target}.sql"
    return (_FIXTURES_DIR / filename).read_text()
