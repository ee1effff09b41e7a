import pprint
from abc import ABC, abstractmethod
from typing import Any, Sequence

from recordkit.database.Attribute import Attribute
from recordkit.database.Row import Row
from recordkit.database.Table import Table, TableRegistry
from recordkit.database.active_record.Logging import debug_enabled, logger


class Database(ABC):
    """
    Connection collaborator used by every ActiveRecord operation.

    Besides running statements it carries the table registry, so each
    connection knows which table every mapped type was set up against.
    """
    connection = None
    connection_string: str = ""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.logging_enabled = debug_enabled()
        self.logger = logger
        self.tables = TableRegistry()

    def _log_query(self, sql: str, params: Sequence[Any], elapsed_ms: float):
        if self.logging_enabled:
            log_entry = {
                "event": "sql_query",
                "sql": sql,
                "params": list(params),
                "elapsed_ms": round(elapsed_ms, 2),
                "database": self.__class__.__name__,
            }
            self.logger.debug("\n" + pprint.pformat(log_entry, indent=2, width=80, compact=False) + "\n")

    @staticmethod
    def bind(params: Sequence[Any]) -> tuple:
        """Turns Attribute parameters into driver values."""
        return tuple(Attribute.from_native(param).to_sql() for param in params)

    # --------------------------------------------------------------------------
    # Table registry
    # --------------------------------------------------------------------------

    def get_table(self, type_name: str) -> Table:
        return self.tables.get_table(type_name)

    def set_table(self, type_name: str, table: Table) -> Table:
        return self.tables.set_table(type_name, table)

    # --------------------------------------------------------------------------
    # Statements
    # --------------------------------------------------------------------------

    @abstractmethod
    def execute(self, sql: str, params: Sequence[Any] = ()) -> bool:
        """Run a statement that returns no rows."""

    @abstractmethod
    def select_one(self, sql: str, params: Sequence[Any] = ()) -> Row:
        """Run a statement expected to return at most one row."""

    @abstractmethod
    def select_all(self, sql: str, params: Sequence[Any] = ()) -> list[Row]:
        ...

    @abstractmethod
    def insert(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run an INSERT and return the generated primary key."""

    def close(self):
        pass
