"""Database connection management."""

import asyncio
from pathlib import Path
from typing import Optional

import aiosqlite

from forzendb.utils.config import DatabaseConfig
from forzendb.utils.errors import DatabaseConnectionError, NoConnectionError
from forzendb.utils.logging import get_logger

logger = get_logger(__name__)


class ConnectionManager:
    """Owns the single optional connection handle to the database file."""

    def __init__(self, db_path: Path, config: Optional[DatabaseConfig] = None) -> None:
        """Initialize connection manager with database path."""
        self.db_path = Path(db_path)
        self.config = config or DatabaseConfig()
        self._connection: Optional[aiosqlite.Connection] = None
        self._lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    @property
    def connection(self) -> aiosqlite.Connection:
        """The open connection.

        Raises:
            NoConnectionError: If no connection is open
        """
        if self._connection is None:
            raise NoConnectionError(
                "No open database connection", details={"db_path": str(self.db_path)}
            )
        return self._connection

    async def open(self) -> bool:
        """Open the connection if none is open.

        Returns:
            True if this call opened the connection, False if one was already open
        """
        async with self._lock:
            if self._connection is not None:
                return False

            self._connection = await self._connect()
            return True

    async def _connect(self) -> aiosqlite.Connection:
        """Establish a new database connection."""
        try:
            # isolation_level=None puts sqlite in autocommit mode
            connection = await aiosqlite.connect(
                str(self.db_path),
                timeout=self.config.timeout,
                isolation_level=None,
            )
        except Exception as e:
            raise DatabaseConnectionError(
                "Failed to connect to database",
                details={"db_path": str(self.db_path), "error": str(e)},
            ) from e

        try:
            if self.config.foreign_keys:
                await connection.execute("PRAGMA foreign_keys = ON;")
            connection.row_factory = aiosqlite.Row
        except Exception as e:
            await connection.close()
            raise DatabaseConnectionError(
                "Failed to configure database connection",
                details={"db_path": str(self.db_path), "error": str(e)},
            ) from e

        logger.debug(f"Database connected: {self.db_path}")
        return connection

    async def close(self) -> None:
        """Close the connection if one is open."""
        connection, self._connection = self._connection, None
        if connection is None:
            return

        try:
            await connection.close()
            logger.debug("Database connection closed")
        except Exception as e:
            raise DatabaseConnectionError(
                "Failed to close database connection",
                details={"db_path": str(self.db_path), "error": str(e)},
            ) from e
