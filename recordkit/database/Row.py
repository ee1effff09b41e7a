from typing import Any, Iterable, Optional, Tuple

from recordkit.database.Attribute import Attribute, parse_date
from recordkit.database.AttributeHash import AttributeHash
from recordkit.database.Exceptions import TypeMismatch, UnsupportedColumnType


def _raw_text(raw: Any) -> str:
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return bytes(raw).decode("utf-8")
    return str(raw)


def _integer(raw: Any) -> int:
    if isinstance(raw, float) and not raw.is_integer():
        raise TypeMismatch(f"INTEGER column holds a fractional value: {raw!r}")
    try:
        return int(raw)
    except (TypeError, ValueError, OverflowError) as e:
        raise TypeMismatch(f"INTEGER column holds a non-integer value: {raw!r}") from e


def _float(raw: Any) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError) as e:
        raise TypeMismatch(f"FLOAT column holds a non-numeric value: {raw!r}") from e


def decode_field(declared_type: Optional[str], raw: Any) -> Attribute:
    """
    Convert one driver cell into an Attribute using the column's declared type.

    Only the leading word of the declared type is considered, so
    ``INTEGER`` and ``integer`` decode alike. A NULL cell is always absent.
    A cell that does not fit its numeric column raises TypeMismatch.
    """
    if not declared_type:
        # NULL expression or a column SQLite could not type
        if raw is None:
            return Attribute.absent()
        return Attribute(_raw_text(raw))

    type_name = declared_type.strip().split()[0].split("(")[0].upper()

    if type_name == "INTEGER":
        return Attribute.absent() if raw is None else Attribute(_integer(raw))

    if type_name == "FLOAT":
        return Attribute.absent() if raw is None else Attribute(_float(raw))

    if type_name == "TEXT":
        return Attribute.absent() if raw is None else Attribute(_raw_text(raw))

    if type_name == "DATE":
        return Attribute.absent() if raw is None else Attribute(parse_date(_raw_text(raw)))

    raise UnsupportedColumnType(f"Unhandled data type: {declared_type}")


def decode_row(columns: Iterable[Tuple[str, Optional[str], Any]]) -> AttributeHash:
    """Decode ``(name, declared_type, raw)`` triples into an AttributeHash."""
    attributes = AttributeHash()
    for name, declared_type, raw in columns:
        attributes[name] = decode_field(declared_type, raw)
    return attributes


class Row:
    """A single result row as returned by ``select_one``; may hold no data."""

    def __init__(self, attributes: AttributeHash | None = None):
        self._attributes = attributes if attributes is not None else AttributeHash()

    @classmethod
    def empty(cls) -> "Row":
        return cls()

    @classmethod
    def from_columns(cls, columns: Iterable[Tuple[str, Optional[str], Any]]) -> "Row":
        return cls(decode_row(columns))

    def has_data(self) -> bool:
        return len(self._attributes) > 0

    def attributes(self) -> AttributeHash:
        return self._attributes

    def __repr__(self):
        return f"Row({self._attributes!r})"
