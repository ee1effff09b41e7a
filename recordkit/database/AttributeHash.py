from collections.abc import MutableMapping
from typing import Any, Iterator, Mapping

from recordkit.database.Attribute import Attribute


class AttributeHash(MutableMapping):
    """
    Column name -> Attribute map holding one record's fields.

    Natives assigned into the map are wrapped with ``Attribute.from_native``,
    so ``attrs["age"] = 30`` and ``attrs["age"] = Attribute(30)`` are the same.
    """

    def __init__(self, initial: Mapping[str, Any] | None = None, **kwargs: Any):
        self._data: dict[str, Attribute] = {}
        if initial:
            self.update(initial)
        if kwargs:
            self.update(kwargs)

    def __getitem__(self, name: str) -> Attribute:
        return self._data[name]

    def __setitem__(self, name: str, value: Any):
        self._data[name] = Attribute.from_native(value)

    def __delitem__(self, name: str):
        del self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def get(self, name: str, default: Attribute | None = None) -> Attribute:
        """Missing names read as absent."""
        if name in self._data:
            return self._data[name]
        return default if default is not None else Attribute.absent()

    def items_sorted(self) -> list[tuple[str, Attribute]]:
        return sorted(self._data.items(), key=lambda pair: pair[0])

    def to_native(self) -> dict[str, Any]:
        return {name: attribute.value for name, attribute in self._data.items()}

    def copy(self) -> "AttributeHash":
        return AttributeHash(self._data)

    def __eq__(self, other):
        if not isinstance(other, AttributeHash):
            return NotImplemented
        if len(self) != len(other):
            return False
        return all(attribute == other.get(name) for name, attribute in self._data.items())

    __hash__ = None

    def __repr__(self):
        pairs = ", ".join(f"{name}={attribute!r}" for name, attribute in self.items_sorted())
        return f"AttributeHash({pairs})"
