"""schemaQL execution layer: connection providers and row materialization."""
from schemaql.execute.connection import (
    ConnectionProvider,
    DBAPIConnectionProvider,
    SQLAlchemyConnectionProvider,
)
from schemaql.execute.materializer import Record, materialize, materialize_first

__all__ = [
    "ConnectionProvider",
    "DBAPIConnectionProvider",
    "SQLAlchemyConnectionProvider",
    "Record",
    "materialize",
    "materialize_first",
]
