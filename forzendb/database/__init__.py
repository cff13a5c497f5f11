"""Database access layer - public API."""

from .base import ForzenDb
from .connection import ConnectionManager
from .database import ForzenSqliteDb, RunResult
from .entity import Entity
from .schema import Column, ColumnType, QueryBuilder, TableDefinition

__all__ = [
    "ForzenDb",
    "ForzenSqliteDb",
    "RunResult",
    "ConnectionManager",
    "Entity",
    "Column",
    "ColumnType",
    "QueryBuilder",
    "TableDefinition",
]
