"""Connection providers: where connections and schema metadata come from.

A :class:`ConnectionProvider` ties together everything the adapter needs
to know about one database endpoint:

* ``endpoint_identity`` – a stable key the schema catalog caches under;
* ``dialect`` – the SQL rendering rules for the endpoint;
* ``create_connection()`` – a fresh, open DB-API 2.0 connection;
* ``load_schema()`` – builds the endpoint's SchemaSnapshot.

Two implementations are provided.  :class:`SQLAlchemyConnectionProvider`
borrows raw driver connections from an engine (pooling stays SQLAlchemy's
concern) and reflects the schema through it.  :class:`DBAPIConnectionProvider`
wraps any driver ``connect`` callable plus a schema loader callable.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING, Any

from schemaql.compile.base import SQLDialect
from schemaql.compile.registry import DialectFactory
from schemaql.config import ReflectionOptions
from schemaql.schema.converters import schema_from_sqlalchemy
from schemaql.schema.snapshot import SchemaSnapshot

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


class ConnectionProvider(ABC):
    """Abstract source of connections and schema for one endpoint."""

    @property
    @abstractmethod
    def endpoint_identity(self) -> Hashable:
        """Stable key identifying the endpoint (same database → same key)."""

    @property
    @abstractmethod
    def dialect(self) -> SQLDialect:
        """Dialect used to render SQL for this endpoint."""

    @abstractmethod
    def create_connection(self) -> Any:
        """Return a new, open DB-API 2.0 connection.

        The caller owns the connection and closes it.
        """

    @abstractmethod
    def load_schema(self) -> SchemaSnapshot:
        """Read the endpoint's metadata and build a SchemaSnapshot."""

    @property
    def description(self) -> str:
        """Log-safe description of the endpoint."""
        return str(self.endpoint_identity)


class SQLAlchemyConnectionProvider(ConnectionProvider):
    """Provider backed by a SQLAlchemy :class:`~sqlalchemy.Engine`.

    Connections are ``engine.raw_connection()`` proxies: closing one returns
    the driver connection to the engine's pool.

    Args:
        engine: The engine to borrow connections from and reflect.
        options: Reflection settings; ``options.dialect`` overrides the
            dialect inferred from ``engine.dialect.name``.
    """

    def __init__(self, engine: Engine, options: ReflectionOptions | None = None) -> None:
        self._engine = engine
        self._options = options or ReflectionOptions()
        if self._options.dialect is not None:
            self._dialect = DialectFactory.create(self._options.dialect)
        else:
            self._dialect = DialectFactory.for_sqlalchemy(engine.dialect.name)

    @property
    def endpoint_identity(self) -> Hashable:
        return (
            self._engine.url.render_as_string(hide_password=False),
            self._options.schema_name,
        )

    @property
    def dialect(self) -> SQLDialect:
        return self._dialect

    @property
    def description(self) -> str:
        url = self._engine.url.render_as_string(hide_password=True)
        if self._options.schema_name:
            return f"{url} (schema {self._options.schema_name})"
        return url

    def create_connection(self) -> Any:
        return self._engine.raw_connection()

    def load_schema(self) -> SchemaSnapshot:
        logger.debug("Reflecting schema for %s", self.description)
        return schema_from_sqlalchemy(
            self._engine,
            self._dialect,
            include_tables=self._options.include_tables,
            schema_name=self._options.schema_name,
        )


class DBAPIConnectionProvider(ConnectionProvider):
    """Provider wrapping a plain DB-API ``connect`` callable.

    Example::

        import sqlite3

        provider = DBAPIConnectionProvider(
            connect=lambda: sqlite3.connect("app.db"),
            endpoint_identity="sqlite:app.db",
            dialect="sqlite",
            schema_loader=lambda p: SchemaSnapshot.from_definition(schema, p.dialect),
        )

    Args:
        connect: Zero-argument callable returning an open connection.
        endpoint_identity: Stable cache key for the endpoint.
        dialect: A dialect instance or a registered dialect target name.
        schema_loader: Callable building the snapshot for this provider.
    """

    def __init__(
        self,
        connect: Callable[[], Any],
        endpoint_identity: Hashable,
        dialect: SQLDialect | str,
        schema_loader: Callable[[DBAPIConnectionProvider], SchemaSnapshot],
    ) -> None:
        self._connect = connect
        self._endpoint_identity = endpoint_identity
        self._dialect = DialectFactory.create(dialect) if isinstance(dialect, str) else dialect
        self._schema_loader = schema_loader

    @property
    def endpoint_identity(self) -> Hashable:
        return self._endpoint_identity

    @property
    def dialect(self) -> SQLDialect:
        return self._dialect

    def create_connection(self) -> Any:
        return self._connect()

    def load_schema(self) -> SchemaSnapshot:
        return self._schema_loader(self)
