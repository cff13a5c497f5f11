"""Entities: ordered column values destined for one table."""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Tuple

from forzendb.utils.errors import (
    InvalidEntityError,
    MissingRequiredFieldError,
    SchemaError,
)

from .schema import QueryBuilder, TableDefinition, validate_identifier

TABLE_NAME_FIELD = "table_name"


@dataclass(frozen=True)
class Entity:
    """A row to insert, as (column, value) pairs in insertion order."""

    table_name: str
    values: Tuple[Tuple[str, Any], ...] = field(default_factory=tuple)

    def __post_init__(self):
        pairs = tuple((column, value) for column, value in self.values)
        object.__setattr__(self, "values", pairs)

        try:
            validate_identifier(self.table_name, "table")
            for column, _ in pairs:
                validate_identifier(column, "column")
        except SchemaError as e:
            raise InvalidEntityError(e.message, details=e.details) from e

        if not pairs:
            raise InvalidEntityError(
                f"Entity for table {self.table_name} has no column values",
                details={"table": self.table_name},
            )

        columns = self.columns
        duplicates = sorted({c for c in columns if columns.count(c) > 1})
        if duplicates:
            raise InvalidEntityError(
                f"Duplicate columns in entity: {', '.join(duplicates)}",
                details={"table": self.table_name, "duplicates": duplicates},
            )

    @classmethod
    def from_record(
        cls, record: Mapping[str, Any], table_field: str = TABLE_NAME_FIELD
    ) -> "Entity":
        """Build an entity from a loose mapping.

        The table name is read from ``table_field``; every other key becomes
        a column, in the mapping's iteration order.
        """
        if table_field not in record:
            raise InvalidEntityError(
                f"Record has no {table_field!r} field",
                details={"fields": list(record.keys())},
            )

        pairs = [(key, value) for key, value in record.items() if key != table_field]
        return cls(record[table_field], tuple(pairs))

    @property
    def columns(self) -> List[str]:
        return [column for column, _ in self.values]

    @property
    def arguments(self) -> List[Any]:
        return [value for _, value in self.values]

    def as_dict(self) -> dict:
        return dict(self.values)

    def insert_sql(self) -> str:
        return QueryBuilder.build_insert(self.table_name, self.columns)

    def validate_against(self, table: TableDefinition) -> None:
        """Check the entity fits the table definition before inserting it.

        Raises:
            InvalidEntityError: Table name mismatch or unknown columns
            MissingRequiredFieldError: A NOT NULL column is absent or None
        """
        if self.table_name != table.name:
            raise InvalidEntityError(
                f"Entity targets table {self.table_name}, not {table.name}",
                details={"entity_table": self.table_name, "table": table.name},
            )

        unknown = [c for c in self.columns if table.get_column(c) is None]
        if unknown:
            raise InvalidEntityError(
                f"Unknown columns for table {table.name}: {', '.join(unknown)}",
                details={"table": table.name, "unknown": unknown},
            )

        values = self.as_dict()
        for column in table.columns:
            # sqlite assigns INTEGER PRIMARY KEY values itself
            if column.allow_null or column.is_primary_key:
                continue
            if values.get(column.name) is None:
                raise MissingRequiredFieldError(
                    f"Column {column.name} of table {table.name} requires a value",
                    details={"table": table.name, "column": column.name},
                )
