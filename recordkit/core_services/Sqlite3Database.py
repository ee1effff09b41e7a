import os
import re
import sqlite3
import time
from typing import Any, Optional, Sequence

from dotenv import load_dotenv

from recordkit.core_services.Database import Database
from recordkit.database.Row import Row

load_dotenv()

FROM_TABLE = re.compile(r"(?i)\bFROM\s+[`\"\[]?(\w+)")
# `column AS alias` (or `t.column AS alias`) in a select list, not inside a call or arithmetic
COLUMN_ALIAS = re.compile(r"(?i)(?<![\w.(+\-*/%|])(?<![(+\-*/%|]\s)(?:\w+\.)?(\w+)\s+AS\s+[`\"\[]?(\w+)")


class Sqlite3Database(Database):
    connection = None
    connection_string: str = os.getenv("SQLITE_DATABASE", ":memory:")

    def __init__(self, connection_string: Optional[str] = None):
        super().__init__()
        if connection_string is not None:
            self.connection_string = connection_string
        self.cursor = None
        self._declared_types: dict[str, dict[str, str]] = {}

    def connect(self):
        # One connection per instance, an in-memory database lives as long as it does
        if self.connection is None:
            self.connection = sqlite3.connect(self.connection_string)
        self.cursor = self.connection.cursor()
        return self.cursor

    def close(self):
        if self.connection is not None:
            self.connection.close()
            self.connection = None
            self.cursor = None

    def _run(self, sql: str, params: Sequence[Any]):
        values = self.bind(params)
        cursor = self.connect()
        try:
            start_time = time.perf_counter()
            cursor.execute(sql, values)
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            self._log_query(sql, values, elapsed_ms)
        except sqlite3.Error as e:
            self.logger.error(f"{e.__class__.__name__}: {e} | SQL: {sql}")
            raise
        return cursor

    # --------------------------------------------------------------------------
    # Declared column types
    # --------------------------------------------------------------------------

    def declared_types(self, table_name: str) -> dict[str, str]:
        """Lower-cased column name -> declared type, read from PRAGMA table_info once per table."""
        if table_name not in self._declared_types:
            cursor = self.connect()
            cursor.execute(f"PRAGMA table_info({table_name})")
            self._declared_types[table_name] = {row[1].lower(): row[2] for row in cursor.fetchall()}
        return self._declared_types[table_name]

    def _result_types(self, sql: str) -> dict[str, str]:
        """
        Declared types of the result columns, keyed by lower-cased name.

        Plain columns and simple aliases of them (``age AS years``) resolve to
        the column's declared type. Expressions, even aliased ones, have none
        and decode as raw text.
        """
        match = FROM_TABLE.search(sql)
        if not match:
            return {}

        types = dict(self.declared_types(match.group(1)))
        for column, alias in COLUMN_ALIAS.findall(sql[:match.start()]):
            types[alias.lower()] = types.get(column.lower())
        return types

    def _decode(self, sql: str, cursor, raw_rows) -> list[Row]:
        types = self._result_types(sql)
        names = [column[0] for column in cursor.description]
        return [
            Row.from_columns((name, types.get(name.lower()), raw) for name, raw in zip(names, raw_row))
            for raw_row in raw_rows
        ]

    def forget_declared_types(self):
        """Call after altering a table so the next select re-reads its columns."""
        self._declared_types.clear()

    # --------------------------------------------------------------------------
    # Statements
    # --------------------------------------------------------------------------

    def execute(self, sql: str, params: Sequence[Any] = ()) -> bool:
        cursor = self._run(sql, params)
        self.connection.commit()
        if cursor.rowcount == 0:
            self.logger.warning(f"Statement affected no rows: {sql}")
        return True

    def select_one(self, sql: str, params: Sequence[Any] = ()) -> Row:
        cursor = self._run(sql, params)
        raw_row = cursor.fetchone()
        if raw_row is None:
            return Row.empty()
        return self._decode(sql, cursor, [raw_row])[0]

    def select_all(self, sql: str, params: Sequence[Any] = ()) -> list[Row]:
        cursor = self._run(sql, params)
        return self._decode(sql, cursor, cursor.fetchall())

    def insert(self, sql: str, params: Sequence[Any] = ()) -> int:
        cursor = self._run(sql, params)
        self.connection.commit()
        return cursor.lastrowid

    def script(self, sql: str):
        """Run several DDL statements at once, e.g. to create tables in tests."""
        self.connect().executescript(sql)
        self.connection.commit()
        self.forget_declared_types()
