"""schemaQL schema models: SchemaSnapshot, criteria trees, SchemaCatalog."""
from schemaql.schema.catalog import SchemaCatalog
from schemaql.schema.column_reference import ColumnReference
from schemaql.schema.criteria import (
    ColumnRef,
    Combinator,
    Comparison,
    Criteria,
    all_of,
    any_of,
    parse_criteria,
)
from schemaql.schema.expressions import CompareOp, LogicalOp
from schemaql.schema.snapshot import (
    ColumnInfo,
    SchemaSnapshot,
    SchemaSnapshotBuilder,
    TableInfo,
)

__all__ = [
    "SchemaCatalog",
    "ColumnReference",
    "ColumnRef",
    "Combinator",
    "Comparison",
    "Criteria",
    "all_of",
    "any_of",
    "parse_criteria",
    "CompareOp",
    "LogicalOp",
    "ColumnInfo",
    "SchemaSnapshot",
    "SchemaSnapshotBuilder",
    "TableInfo",
]
