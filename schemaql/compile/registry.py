"""Dialect registry (Open/Closed Principle).

``DialectFactory``
    Central registry for :class:`~schemaql.compile.base.SQLDialect`
    implementations.  Register a new dialect once; providers and callers
    look it up by name.

Usage::

    from schemaql.compile.registry import DialectFactory

    @DialectFactory.register("oracle")
    class OracleDialect(SQLDialect):
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

from schemaql.compile.base import SQLDialect
from schemaql.errors import DialectNotSupportedError

#: SQLAlchemy ``engine.dialect.name`` values that differ from our targets.
_SQLALCHEMY_ALIASES: dict[str, str] = {
    "mssql": "sqlserver",
    "postgresql": "postgres",
    "mariadb": "mysql",
}


class DialectFactory:
    """Registry mapping dialect target names to :class:`SQLDialect` classes.

    Example::

        @DialectFactory.register("oracle")
        class OracleDialect(SQLDialect):
            ...

        dialect = DialectFactory.create("oracle")
    """

    _dialects: ClassVar[dict[str, type[SQLDialect]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[SQLDialect]], type[SQLDialect]]:
        """Decorator that registers a dialect class under ``name``.

        Args:
            name: The dialect target name (e.g. ``"sqlserver"``).

        Returns:
            A decorator that registers and returns the dialect class.
        """

        def decorator(dialect_cls: type[SQLDialect]) -> type[SQLDialect]:
            cls._dialects[name] = dialect_cls
            return dialect_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, dialect_cls: type[SQLDialect]) -> None:
        """Register a dialect class without using the decorator form."""
        cls._dialects[name] = dialect_cls

    @classmethod
    def create(cls, name: str) -> SQLDialect:
        """Instantiate the dialect registered for ``name``.

        Raises:
            DialectNotSupportedError: If no dialect is registered for ``name``.
        """
        dialect_cls = cls._dialects.get(name)
        if dialect_cls is None:
            registered = sorted(cls._dialects)
            raise DialectNotSupportedError(
                f"Unsupported dialect target: '{name}'. Registered targets: {registered}.",
                details={"target": name, "registered_targets": registered},
            )
        return dialect_cls()

    @classmethod
    def for_sqlalchemy(cls, sqlalchemy_name: str) -> SQLDialect:
        """Instantiate the dialect matching a SQLAlchemy ``dialect.name``."""
        return cls.create(_SQLALCHEMY_ALIASES.get(sqlalchemy_name, sqlalchemy_name))

    @classmethod
    def registered_targets(cls) -> list[str]:
        """Return the sorted list of registered dialect target names."""
        return sorted(cls._dialects)
