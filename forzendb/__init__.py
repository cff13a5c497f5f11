"""forzendb: sessions, raw SQL and typed helpers over an embedded SQLite file."""

from forzendb.database import (
    Column,
    ColumnType,
    Entity,
    ForzenDb,
    ForzenSqliteDb,
    RunResult,
    TableDefinition,
)
from forzendb.utils.errors import (
    DatabaseConnectionError,
    ForzenError,
    NoConnectionError,
    QueryError,
)

__version__ = "0.1.0"

__all__ = [
    "Column",
    "ColumnType",
    "Entity",
    "ForzenDb",
    "ForzenSqliteDb",
    "RunResult",
    "TableDefinition",
    "DatabaseConnectionError",
    "ForzenError",
    "NoConnectionError",
    "QueryError",
]
