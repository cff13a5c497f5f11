"""Abstract interface of a forzendb database."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .entity import Entity
from .schema import TableDefinition

# A block may be a coroutine function or a plain callable
SessionBlock = Callable[[], Any]


class ForzenDb(ABC):
    """Session-scoped access to an embedded SQL database.

    Every query method works both inside and outside a session. Outside one,
    the call opens a connection, runs, and closes it again. Inside one, the
    session's connection is reused and left open.
    """

    @abstractmethod
    async def begin_session(self) -> None:
        """Begin a session of database operations. Call end_session once done."""

    @abstractmethod
    async def end_session(self) -> None:
        """Finish a session started with begin_session. Safe to call twice."""

    @abstractmethod
    async def session(self, block: SessionBlock) -> Any:
        """Run ``block`` inside a session.

        The session is opened before ``block`` is called and closed after it
        (and any awaitable it returns) has finished, including when it raises.

        Args:
            block: Callable taking no arguments, sync or async

        Returns:
            Whatever ``block`` returned
        """

    @abstractmethod
    async def exec(self, sql: str) -> None:
        """Execute a statement or ``;``-separated statements, returning nothing.

        Args:
            sql: The sql statement(s) to execute
        """

    @abstractmethod
    async def create_table(
        self, table: TableDefinition, allow_preexisting: bool = True
    ) -> None:
        """Create a table from a definition.

        Args:
            table: The table definition to make the table from
            allow_preexisting: Whether an existing table with that name is fine
        """

    @abstractmethod
    async def run(self, sql: str, args: Sequence[Any] = ()) -> Any:
        """Run a mutating statement and return execution metadata."""

    @abstractmethod
    async def get(self, sql: str, args: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        """Run a query and return its first row, or None."""

    @abstractmethod
    async def all(self, sql: str, args: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """Run a query and return every row."""

    @abstractmethod
    async def insert(
        self,
        entity: Entity | Mapping[str, Any],
        table: Optional[TableDefinition] = None,
    ) -> Any:
        """Insert an entity into its table."""

