from dataclasses import dataclass

from recordkit.database.Exceptions import ConfigurationError, UnknownTable


@dataclass(frozen=True)
class Table:
    """Where a mapped type lives: its table and primary key column."""
    table_name: str
    primary_key: str = "id"


class TableRegistry:
    """Table descriptors keyed by mapped type name."""

    def __init__(self):
        self._tables: dict[str, Table] = {}

    def register(self, type_name: str, table: Table) -> Table:
        if not table.table_name:
            raise ConfigurationError("set the table name when returning Table")
        self._tables[type_name] = table
        return table

    def lookup(self, type_name: str) -> Table:
        try:
            return self._tables[type_name]
        except KeyError:
            raise UnknownTable(f"No table registered for '{type_name}'")

    # Connection-facing names
    set_table = register
    get_table = lookup

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._tables

    def __len__(self) -> int:
        return len(self._tables)
