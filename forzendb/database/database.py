"""SQLite implementation of the forzendb interface."""

import inspect
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
)

import aiosqlite

from forzendb.utils.config import DatabaseConfig, get_config
from forzendb.utils.errors import QueryError
from forzendb.utils.logging import async_log_call, get_logger

from .base import ForzenDb, SessionBlock
from .connection import ConnectionManager
from .entity import Entity
from .schema import TableDefinition

logger = get_logger(__name__)


@dataclass(frozen=True)
class RunResult:
    """Execution metadata of a mutating statement."""

    last_row_id: Optional[int]
    changes: int


class ForzenSqliteDb(ForzenDb):
    """ForzenDb backed by a single aiosqlite connection.

    Usage:
        db = ForzenSqliteDb()
        async with db:
            await db.create_table(table)
            await db.insert(entity)
    """

    def __init__(
        self,
        db_path: Optional[Path] = None,
        config: Optional[DatabaseConfig] = None,
    ) -> None:
        self.config = config or get_config().database
        self.db_path = Path(db_path or self.config.database_path)
        self.connection_manager = ConnectionManager(self.db_path, self.config)
        self._scopes: List[bool] = []

    @property
    def is_open(self) -> bool:
        return self.connection_manager.is_open


    ## Sessions

    async def begin_session(self) -> None:
        await self.connection_manager.open()

    async def end_session(self) -> None:
        await self.connection_manager.close()

    async def session(self, block: SessionBlock) -> Any:
        """Begin a session, run ``block`` to completion, then end the session.

        The session is always ended afterwards, also when it was already open
        before the call.
        """
        await self.begin_session()
        try:
            result = block()
            if inspect.isawaitable(result):
                result = await result
        except BaseException:
            await self._close_after_error()
            raise

        await self.end_session()
        return result

    async def __aenter__(self) -> "ForzenSqliteDb":
        """Open a session scope; a scope only closes a connection it opened."""
        self._scopes.append(await self.connection_manager.open())
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        opened = self._scopes.pop()
        if not opened:
            return False

        if exc_type is not None:
            await self._close_after_error()
        else:
            await self.end_session()
        return False

    async def _close_after_error(self) -> None:
        """Close the connection while another exception is propagating."""
        try:
            await self.end_session()
        except Exception as e:
            logger.error(f"Error closing database connection: {e}")

    @asynccontextmanager
    async def _acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield the session connection, or an implicit one closed afterwards."""
        opened = await self.connection_manager.open()
        try:
            yield self.connection_manager.connection
        except BaseException:
            if opened:
                await self._close_after_error()
            raise

        if opened:
            await self.connection_manager.close()

    async def _execute(
        self, sql: str, operation: Callable[[aiosqlite.Connection], Awaitable[Any]]
    ) -> Any:
        """Run ``operation`` on a connection, wrapping driver errors."""
        async with self._acquire() as conn:
            try:
                return await operation(conn)
            # sqlite3 raises OverflowError, TypeError or ValueError for some bad bindings
            except (aiosqlite.Error, OverflowError, TypeError, ValueError) as e:
                logger.error(f"Database error for query:\n{sql}")
                raise QueryError(str(e), sql=sql, details={"error": str(e)}) from e


    ## Queries

    async def exec(self, sql: str) -> None:
        async def _exec(conn: aiosqlite.Connection) -> None:
            await conn.executescript(sql)

        await self._execute(sql, _exec)

    async def run(self, sql: str, args: Sequence[Any] = ()) -> RunResult:
        params = tuple(args)

        async def _run(conn: aiosqlite.Connection) -> RunResult:
            async with conn.execute(sql, params) as cursor:
                return RunResult(last_row_id=cursor.lastrowid, changes=cursor.rowcount)

        return await self._execute(sql, _run)

    async def get(self, sql: str, args: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        params = tuple(args)

        async def _get(conn: aiosqlite.Connection) -> Optional[Dict[str, Any]]:
            async with conn.execute(sql, params) as cursor:
                row = await cursor.fetchone()
                return dict(row) if row is not None else None

        return await self._execute(sql, _get)

    async def all(self, sql: str, args: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        params = tuple(args)

        async def _all(conn: aiosqlite.Connection) -> List[Dict[str, Any]]:
            async with conn.execute(sql, params) as cursor:
                rows = await cursor.fetchall()
                return [dict(row) for row in rows]

        return await self._execute(sql, _all)


    ## Typed Helpers

    @async_log_call
    async def create_table(
        self, table: TableDefinition, allow_preexisting: bool = True
    ) -> None:
        await self.exec(table.create_table_sql(allow_preexisting))

    @async_log_call
    async def insert(
        self,
        entity: Entity | Mapping[str, Any],
        table: Optional[TableDefinition] = None,
    ) -> RunResult:
        """Insert an entity, validating it against ``table`` when given.

        Args:
            entity: An Entity, or a mapping with a ``table_name`` field
            table: Optional definition of the target table

        Returns:
            RunResult of the INSERT statement
        """
        if not isinstance(entity, Entity):
            entity = Entity.from_record(entity)

        if table is not None:
            entity.validate_against(table)

        return await self.run(entity.insert_sql(), entity.arguments)
