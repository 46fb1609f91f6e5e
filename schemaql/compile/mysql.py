"""MySQL dialect."""

from __future__ import annotations

from typing import TYPE_CHECKING

from schemaql.compile.base import SQLDialect

if TYPE_CHECKING:
    from schemaql.schema.snapshot import ColumnInfo, TableInfo


class MySQLDialect(SQLDialect):
    """Renders MySQL SQL.

    Parameter style: ``%s`` – compatible with ``PyMySQL`` and
    ``mysql-connector-python`` positional execution.

    Identifiers are quoted with backticks (`` ` ``) rather than double-quotes.

    Note: MySQL has no ``RETURNING``; the inserted row is selected in the
    same batch through ``LAST_INSERT_ID()``.  PyMySQL and mysqlclient
    disable multi-statement batches by default, and a connection without
    them fails the first insert into a table with an identity column.
    Enable them when connecting::

        import pymysql
        from pymysql.constants import CLIENT

        provider = DBAPIConnectionProvider(
            connect=lambda: pymysql.connect(
                host="db", user="app", database="shop",
                client_flag=CLIENT.MULTI_STATEMENTS,
            ),
            endpoint_identity="mysql://db/shop",
            dialect="mysql",
            schema_loader=load_shop_schema,
        )

        # or, through SQLAlchemy
        engine = create_engine(
            "mysql+pymysql://app@db/shop",
            connect_args={"client_flag": CLIENT.MULTI_STATEMENTS},
        )
    """

    @property
    def dialect_name(self) -> str:
        return "mysql"

    def param_placeholder(self) -> str:
        return "%s"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace("`", "``")
        return f"`{escaped}`"

    def identity_insert(
        self,
        insert_sql: str,
        table: TableInfo,
        identity_column: ColumnInfo,
    ) -> str:
        return (
            f"{insert_sql}; SELECT * FROM {table.quoted_name} "
            f"WHERE {identity_column.quoted_name} = LAST_INSERT_ID()"
        )
