from datetime import date, datetime
from enum import Enum
from typing import Any

from recordkit.database.Exceptions import AbsentValue, TypeMismatch

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

DATE_FORMAT = "%Y-%m-%d"


class AttributeKind(Enum):
    ABSENT = "absent"
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"
    DATE = "date"


def parse_date(text: str) -> date:
    """Parse a YYYY-MM-DD cell into a date."""
    try:
        return datetime.strptime(text.strip(), DATE_FORMAT).date()
    except (ValueError, AttributeError):
        raise TypeMismatch(f"Cannot parse date from {text!r}")


def _kind_of(value: Any) -> AttributeKind:
    if value is None:
        return AttributeKind.ABSENT
    # bool is an int subclass and datetime a date subclass, neither is a column kind
    if isinstance(value, bool):
        raise TypeMismatch("bool is not a supported attribute type")
    if isinstance(value, int):
        if not INT64_MIN <= value <= INT64_MAX:
            raise TypeMismatch(f"Integer {value} does not fit in 64 bits")
        return AttributeKind.INTEGER
    if isinstance(value, float):
        return AttributeKind.FLOAT
    if isinstance(value, str):
        return AttributeKind.TEXT
    if isinstance(value, datetime):
        raise TypeMismatch("datetime is not a supported attribute type, use date")
    if isinstance(value, date):
        return AttributeKind.DATE
    raise TypeMismatch(f"{type(value).__name__} is not a supported attribute type")


class Attribute:
    """
    One column's value: absent, or exactly one of integer, float, text or date.

    Values are immutable and compare by kind and payload, so ``Attribute(1)``
    never equals ``Attribute(1.0)``.
    """
    __slots__ = ("_kind", "_value")

    def __init__(self, value: Any = None):
        if isinstance(value, Attribute):
            kind, value = value.kind, value.value
        else:
            kind = _kind_of(value)
        object.__setattr__(self, "_kind", kind)
        object.__setattr__(self, "_value", value)

    @classmethod
    def from_native(cls, value: Any) -> "Attribute":
        if isinstance(value, Attribute):
            return value
        return cls(value)

    @classmethod
    def absent(cls) -> "Attribute":
        return cls(None)

    def __setattr__(self, key, value):
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    @property
    def kind(self) -> AttributeKind:
        return self._kind

    @property
    def value(self) -> Any:
        return self._value

    def is_absent(self) -> bool:
        return self._kind is AttributeKind.ABSENT

    # --------------------------------------------------------------------------
    # Extraction
    # --------------------------------------------------------------------------

    def _extract(self, kind: AttributeKind) -> Any:
        if self._kind is kind:
            return self._value
        if self._kind is AttributeKind.ABSENT:
            raise AbsentValue(f"Expected {kind.value}, attribute is absent")
        raise TypeMismatch(f"Expected {kind.value}, attribute holds {self._kind.value}")

    def as_integer(self) -> int:
        return self._extract(AttributeKind.INTEGER)

    def as_float(self) -> float:
        return self._extract(AttributeKind.FLOAT)

    def as_text(self) -> str:
        return self._extract(AttributeKind.TEXT)

    def as_date(self) -> date:
        return self._extract(AttributeKind.DATE)

    def to_sql(self) -> Any:
        """
        Returns the value in the form the driver binds as a parameter.
        Dates are bound as ISO text so they read back through the DATE decoder.
        """
        if self._kind is AttributeKind.DATE:
            return self._value.strftime(DATE_FORMAT)
        return self._value

    # --------------------------------------------------------------------------
    # Comparison & display
    # --------------------------------------------------------------------------

    def __eq__(self, other):
        if not isinstance(other, Attribute):
            return NotImplemented
        return self._kind is other._kind and self._value == other._value

    def __hash__(self):
        return hash((self._kind, self._value))

    def __str__(self):
        if self._kind is AttributeKind.ABSENT:
            return "NULL"
        if self._kind is AttributeKind.DATE:
            return self._value.strftime(DATE_FORMAT)
        return str(self._value)

    def __repr__(self):
        if self._kind is AttributeKind.ABSENT:
            return "Attribute(absent)"
        return f"Attribute({self._kind.value}, {self._value!r})"
