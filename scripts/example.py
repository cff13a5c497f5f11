"""Example session: raw SQL, then a declared table and an entity insert."""

import asyncio

from forzendb import ColumnType, Entity, ForzenSqliteDb, TableDefinition
from forzendb.utils.errors import ForzenError, format_error_message
from forzendb.utils.logging import get_logger, init_logging

logger = get_logger(__name__)


async def main() -> None:
    db = ForzenSqliteDb()

    async def block() -> None:
        # Make a table and insert with raw SQL
        await db.exec(
            """CREATE TABLE IF NOT EXISTS my_table (
                foo INT,
                bar TEXT
            );"""
        )
        await db.run("INSERT INTO my_table (foo, bar) VALUES (?, ?);", [123, "abc"])

        # Make a table and insert with structured objects
        table = TableDefinition(
            "my_table_2",
            (
                TableDefinition.column("foo", ColumnType.INTEGER),
                TableDefinition.column("bar", ColumnType.TEXT),
            ),
        )
        await db.create_table(table, True)
        entity = Entity.from_record({"table_name": "my_table_2", "foo": 1337, "bar": "potato"})
        await db.insert(entity, table)

        print(await db.get("SELECT * FROM my_table", []))
        print(await db.all("SELECT * FROM my_table_2", []))

    try:
        await db.session(block)
    except ForzenError as e:
        logger.error(format_error_message(e))
        raise


if __name__ == "__main__":
    init_logging()
    asyncio.run(main())
