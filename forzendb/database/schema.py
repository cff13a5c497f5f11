"""Table definitions and SQL builders."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence, Tuple

from forzendb.utils.errors import SchemaError

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_identifier(name: str, kind: str = "identifier") -> str:
    """Check that a table or column name is a plain SQL identifier."""
    if not isinstance(name, str) or not IDENTIFIER_PATTERN.match(name):
        raise SchemaError(
            f"Invalid {kind} name: {name!r}",
            details={"kind": kind, "name": name},
        )
    return name


class ColumnType(Enum):
    """SQL storage types supported by the schema translator."""

    INTEGER = "INTEGER"
    TEXT = "TEXT"
    REAL = "REAL"


@dataclass(frozen=True)
class Column:
    """A single column of a table definition."""

    name: str
    type: ColumnType
    allow_null: bool = True
    is_primary_key: bool = False

    def __post_init__(self):
        validate_identifier(self.name, "column")
        if not isinstance(self.type, ColumnType):
            raise SchemaError(
                f"Invalid type for column {self.name}: {self.type!r}",
                details={"column": self.name, "type": repr(self.type)},
            )

    def sql_entry(self) -> str:
        """Render the column as it appears inside CREATE TABLE."""
        entry = f"{self.name} {self.type.value}"
        if self.is_primary_key:
            entry += " PRIMARY KEY"
        if not self.allow_null:
            entry += " NOT NULL"
        return entry


@dataclass(frozen=True)
class TableDefinition:
    """Schema definition for a database table."""

    name: str
    columns: Tuple[Column, ...] = field(default_factory=tuple)

    def __post_init__(self):
        validate_identifier(self.name, "table")
        # Accept any iterable of columns but store an immutable tuple
        object.__setattr__(self, "columns", tuple(self.columns))

        if not self.columns:
            raise SchemaError(
                f"Table {self.name} has no columns", details={"table": self.name}
            )

        names = [column.name for column in self.columns]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise SchemaError(
                f"Duplicate column names in table {self.name}: {', '.join(duplicates)}",
                details={"table": self.name, "duplicates": duplicates},
            )

        primary_keys = [column.name for column in self.columns if column.is_primary_key]
        if len(primary_keys) > 1:
            raise SchemaError(
                f"Composite primary keys are not supported (table {self.name})",
                details={"table": self.name, "primary_keys": primary_keys},
            )

    @staticmethod
    def column(
        name: str,
        type: ColumnType,
        allow_null: bool = True,
        is_primary_key: bool = False,
    ) -> Column:
        """Shorthand for building a Column."""
        return Column(
            name=name, type=type, allow_null=allow_null, is_primary_key=is_primary_key
        )

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    def get_column(self, name: str) -> Column | None:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def create_table_sql(self, allow_preexisting: bool = True) -> str:
        """Generate SQL for creating the table."""
        guard = "IF NOT EXISTS " if allow_preexisting else ""
        body = ", ".join(column.sql_entry() for column in self.columns)

        return f"CREATE TABLE {guard}{self.name} ({body});"


## Query Building


class QueryBuilder:
    """Helper class to build SQL statements."""

    @staticmethod
    def build_placeholders(count: int) -> str:
        """Build a string of placeholders for prepared statements."""
        return ", ".join("?" for _ in range(count))

    @staticmethod
    def build_insert(table_name: str, columns: Sequence[str]) -> str:
        """Build a positional INSERT statement for the given columns."""
        validate_identifier(table_name, "table")
        for column in columns:
            validate_identifier(column, "column")

        return (
            f"INSERT INTO {table_name} ({', '.join(columns)}) "
            f"VALUES ({QueryBuilder.build_placeholders(len(columns))});"
        )
