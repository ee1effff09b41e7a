from collections.abc import Mapping
from datetime import date
from enum import IntEnum
from typing import Any, Optional, Type, TypeVar

from dotenv import load_dotenv

from recordkit.core_services.Database import Database
from recordkit.database.Attribute import Attribute
from recordkit.database.AttributeHash import AttributeHash
from recordkit.database.Exceptions import ConfigurationError, NotLoaded, RecordNotFound
from recordkit.database.QueryBuilder import Query
from recordkit.database.Table import Table
from recordkit.database.active_record.Logging import log_lifecycle
from recordkit.database.active_record.utils.ModelCollection import ModelCollection
from recordkit.database.active_record.utils.Serialization import ActiveRecordUtilitiesSerialization
from recordkit.utilities.Inflection import table_name_for

load_dotenv()

UNSAVED = -1

T = TypeVar("T", bound="ActiveRecord")


class State(IntEnum):
    BLANK = 0
    PREPARED = 1
    UNSAVED = 2
    LOADED = 3


class ActiveRecord(ActiveRecordUtilitiesSerialization):
    """
    Base class for mapped types.

        class Person(ActiveRecord):
            __table__ = "people"

        Person.setup(Sqlite3Database("app.db"))
        alice = Person(name="Alice", age=30)
        alice.save()
        Person(alice.id())["name"]   # loaded on first access

    A record constructed from an id does no I/O until one of its attributes is
    touched. A record constructed from attributes is inserted by ``save()``.
    """
    __table__: str
    __primary_key__: str = "id"
    __class_name__: Optional[str] = None
    __connection__: Optional[Database] = None

    # Table descriptors resolved so far, keyed by (connection, class name).
    # Each mapped type owns its dict, see table_descriptor_for.
    __prepared_tables__: dict[tuple[Database, str], Table] = {}

    # --------------------------------------------------------------------------
    # Class-level configuration
    # --------------------------------------------------------------------------

    @classmethod
    def class_name(cls) -> str:
        name = cls.__class_name__
        return cls.__name__ if name is None else name

    @classmethod
    def table_descriptor(cls) -> Table:
        table_name = getattr(cls, "__table__", None)
        if table_name is None:
            table_name = table_name_for(cls.__name__)
        return Table(table_name, cls.__primary_key__)

    @classmethod
    def setup(cls, connection: Optional[Database]) -> Table:
        """
        Bind the mapped type to a connection and register its table.
        Must run once before any instance touches the database.
        """
        if connection is None:
            raise ConfigurationError("connection is NULL")

        table = cls.table_descriptor()
        if not table.table_name:
            raise ConfigurationError("set the table name when returning Table")

        cls.__connection__ = connection
        connection.set_table(cls.class_name(), table)
        cls.__prepared_tables__ = {}
        log_lifecycle(f"{cls.class_name()} set up against table '{table.table_name}'")
        return table

    @classmethod
    def connection(cls) -> Database:
        if cls.__connection__ is None:
            raise ConfigurationError(f"{cls.__name__} has no connection, call {cls.__name__}.setup() first")
        return cls.__connection__

    @classmethod
    def table_descriptor_for(cls, connection: Database) -> Table:
        """Resolve the registered Table once per mapped type; later calls hit the cache."""
        name = cls.class_name()
        if not name:
            raise ConfigurationError(f"{cls.__name__} declares an empty class name")

        prepared = cls.__dict__.get("__prepared_tables__")
        if prepared is None:
            prepared = cls.__prepared_tables__ = {}

        key = (connection, name)
        if key not in prepared:
            log_lifecycle(f"Base::prepare {name}")
            prepared[key] = connection.get_table(name)
        return prepared[key]

    # --------------------------------------------------------------------------
    # Construction
    # --------------------------------------------------------------------------

    def __init__(self, id_: Any = UNSAVED, attributes: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        if isinstance(id_, Mapping):
            attributes, id_ = id_, UNSAVED
        if id_ != UNSAVED and (attributes is not None or kwargs):
            raise ValueError("Construct a record from an id or from attributes, not both")

        if isinstance(id_, bool) or not isinstance(id_, int):
            raise ValueError(f"{self.class_name()} id must be an integer, got {id_!r}")

        self._state = State.BLANK
        self._id = id_
        self._attributes = AttributeHash()
        self._table: Optional[Table] = None
        self._singular_name = ""

        if attributes is not None or kwargs:
            self.init({**(attributes or {}), **kwargs})

    def init(self: T, attributes: Mapping[str, Any]) -> T:
        """Merge attributes into a new, not yet persisted record."""
        self.ensure_prepared()
        for name, value in attributes.items():
            self._attributes[name] = value

        self._id = UNSAVED
        self._state = State.UNSAVED
        return self

    @classmethod
    def hydrate(cls: Type[T], attributes: AttributeHash) -> T:
        """Build a loaded record from a decoded row."""
        record = cls()
        record.ensure_prepared()
        record._attributes = attributes
        record._id = attributes.get(record._table.primary_key).as_integer()
        record._state = State.LOADED
        return record

    # --------------------------------------------------------------------------
    # State
    # --------------------------------------------------------------------------

    @property
    def state(self) -> State:
        return self._state

    def ensure_prepared(self):
        if self._state >= State.PREPARED:
            return

        cls = self.__class__
        self._table = cls.table_descriptor_for(cls.connection())
        self._singular_name = cls.class_name().lower()
        self._state = State.PREPARED

    def ensure_loaded(self):
        self.ensure_prepared()
        if self._state == State.LOADED:
            return
        if self._id == UNSAVED:
            raise NotLoaded(f"{self.class_name()} has not been saved, there is nothing to load")
        self.load()

    def _load_unless_new(self):
        self.ensure_prepared()
        if self._id == UNSAVED:
            return
        self.ensure_loaded()

    # --------------------------------------------------------------------------
    # Load / save
    # --------------------------------------------------------------------------

    def load(self) -> bool:
        table = self._table
        sql = f"SELECT * FROM {table.table_name} WHERE {table.primary_key} = ?"
        row = self.connection().select_one(sql, [Attribute(self._id)])
        if not row.has_data():
            raise RecordNotFound(f"{self.class_name()} with {table.primary_key} = {self._id} not found")

        self._attributes = row.attributes()
        self._state = State.LOADED
        log_lifecycle(f"{self.class_name()} {self._id} loaded")
        return True

    def save(self) -> bool:
        self.ensure_prepared()
        if self._id == UNSAVED:
            return self._create()
        return self._update()

    def _columns(self) -> list[tuple[str, Attribute]]:
        primary_key = self._table.primary_key
        return [(name, attribute) for name, attribute in self._attributes.items() if name != primary_key]

    def _create(self) -> bool:
        table = self._table
        columns = self._columns()

        if columns:
            names = ", ".join(name for name, _ in columns)
            placeholders = ", ".join("?" for _ in columns)
            sql = f"INSERT INTO {table.table_name} ({names}) VALUES ({placeholders})"
        else:
            # Nothing to write, let the store fill in defaults
            sql = f"INSERT INTO {table.table_name} ({table.primary_key}) VALUES (NULL)"

        self._id = int(self.connection().insert(sql, [attribute for _, attribute in columns]))
        self._attributes[table.primary_key] = self._id
        self._state = State.LOADED
        log_lifecycle(f"{self.class_name()} inserted with {table.primary_key} = {self._id}")
        return True

    def _update(self) -> bool:
        self.ensure_loaded()
        table = self._table
        columns = self._columns()
        if not columns:
            return True

        assignments = ", ".join(f"{name} = ?" for name, _ in columns)
        sql = f"UPDATE {table.table_name} SET {assignments} WHERE {table.primary_key} = ?"
        parameters = [attribute for _, attribute in columns] + [Attribute(self._id)]

        result = self.connection().execute(sql, parameters)
        log_lifecycle(f"{self.class_name()} {self._id} updated")
        return bool(result)

    # --------------------------------------------------------------------------
    # Attributes
    # --------------------------------------------------------------------------

    def __getitem__(self, name: str) -> Any:
        return self.attribute(name).value

    def __setitem__(self, name: str, value: Any):
        self._load_unless_new()
        self._attributes[name] = value

    def __contains__(self, name: str) -> bool:
        self._load_unless_new()
        return name in self._attributes

    def attribute(self, name: str) -> Attribute:
        self._load_unless_new()
        return self._attributes.get(name)

    def get(self, name: str) -> Attribute:
        """Read the in-memory value without loading."""
        return self._attributes.get(name)

    def integer(self, name: str) -> int:
        return self.attribute(name).as_integer()

    def text(self, name: str) -> str:
        return self.attribute(name).as_text()

    def floating_point(self, name: str) -> float:
        return self.attribute(name).as_float()

    def date(self, name: str) -> date:
        return self.attribute(name).as_date()

    def id(self) -> int:
        return self._id

    def has_data(self) -> bool:
        return len(self._attributes) > 0

    def new_record(self) -> bool:
        return self._state != State.LOADED

    # --------------------------------------------------------------------------
    # Associations
    # --------------------------------------------------------------------------

    def _require_loaded(self):
        if self._state < State.LOADED:
            raise NotLoaded(f"{self.class_name()} instance not loaded")

    def has_many(self, model: Type[T], foreign_key: Optional[str] = None) -> ModelCollection:
        self._require_loaded()
        foreign_key = foreign_key or f"{self._singular_name}_id"
        return Query(model).where(f"{foreign_key} = ?", self._id).all()

    def belongs_to(self, model: Type[T], foreign_key: Optional[str] = None) -> T:
        """
        By default the owner's own id addresses the target's primary key.
        Pass ``foreign_key`` to follow a column stored on the owner instead.
        """
        self._require_loaded()
        target = model.table_descriptor_for(model.connection())
        value = self._id if foreign_key is None else self._attributes.get(foreign_key)
        if isinstance(value, Attribute) and value.is_absent():
            raise RecordNotFound(f"{self.class_name()} {self._id} has no {foreign_key}")
        return Query(model).where(f"{target.primary_key} = ?", value).first_strict()

    # --------------------------------------------------------------------------
    # Finders
    # --------------------------------------------------------------------------

    @classmethod
    def find(cls: Type[T], id_: int) -> T:
        record = cls(id_)
        record.ensure_loaded()
        return record

    @classmethod
    def create(cls: Type[T], **attributes: Any) -> T:
        record = cls(attributes)
        record.save()
        return record

    @classmethod
    def query(cls) -> Query:
        return Query(cls)

    @classmethod
    def where(cls, *args: Any) -> Query:
        return Query(cls).where(*args)

    @classmethod
    def all(cls) -> ModelCollection:
        return Query(cls).all()

    # --------------------------------------------------------------------------
    # Comparison & display
    # --------------------------------------------------------------------------

    def clone(self: T) -> T:
        copy = self.__class__.__new__(self.__class__)
        copy.__dict__.update(self.__dict__)
        copy._attributes = self._attributes.copy()
        return copy

    __copy__ = clone

    def __eq__(self, other):
        if not isinstance(other, ActiveRecord):
            return NotImplemented
        if type(self) is not type(other):
            return False
        return (
            self._id == other._id
            and self._state == other._state
            and self._attributes == other._attributes
        )

    __hash__ = None

    def to_string(self) -> str:
        self._load_unless_new()
        pairs = ", ".join(f"{name} {attribute}" for name, attribute in self._attributes.items_sorted())
        return f"{self.class_name()}: {pairs}"

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        return f"<{self.class_name()} id={self._id} state={self._state.name.lower()}>"
