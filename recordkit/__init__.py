from .core_services.Database import Database
from .core_services.Sqlite3Database import Sqlite3Database
from .database.ActiveRecord import ActiveRecord, State, UNSAVED
from .database.Attribute import Attribute, AttributeKind, parse_date
from .database.AttributeHash import AttributeHash
from .database.Exceptions import (
    AbsentValue,
    ActiveRecordException,
    ConfigurationError,
    NotLoaded,
    RecordNotFound,
    TypeMismatch,
    UnknownTable,
    UnsupportedColumnType,
)
from .database.QueryBuilder import Query
from .database.Row import Row, decode_field, decode_row
from .database.Table import Table, TableRegistry
from .database.active_record.Logging import query_logging
from .database.active_record.utils.ModelCollection import ModelCollection

__all__ = [
    "AbsentValue",
    "ActiveRecord",
    "ActiveRecordException",
    "Attribute",
    "AttributeHash",
    "AttributeKind",
    "ConfigurationError",
    "Database",
    "ModelCollection",
    "NotLoaded",
    "Query",
    "RecordNotFound",
    "Row",
    "Sqlite3Database",
    "State",
    "Table",
    "TableRegistry",
    "TypeMismatch",
    "UNSAVED",
    "UnknownTable",
    "UnsupportedColumnType",
    "decode_field",
    "decode_row",
    "parse_date",
    "query_logging",
]
