from pprint import pformat


class DataKlass:
    """Plain dict of record values, readable as attributes: ``data.name``."""

    def __init__(self, initial_data=None):
        self._data = initial_data or {}

    def __getattr__(self, key):
        if key.startswith("_"):
            raise AttributeError(key)
        if key in self._data:
            return self._data[key]
        raise AttributeError(f"{self.__class__.__name__} object has no attribute '{key}'")

    def __setattr__(self, key, value):
        if key == "_data":
            super().__setattr__(key, value)
        else:
            self._data[key] = value

    def __getitem__(self, key):
        return self._data[key]

    def __contains__(self, key):
        return key in self._data

    def __eq__(self, other):
        if isinstance(other, DataKlass):
            return self._data == other._data
        if isinstance(other, dict):
            return self._data == other
        return NotImplemented

    def get(self, key, default=None):
        return self._data.get(key, default)

    def to_dict(self):
        return dict(self._data)

    def __repr__(self):
        return f"{self.__class__.__name__}({pformat(self._data, indent=2, width=100)})"

    def __str__(self):
        return pformat(self._data, indent=2, width=100)
