from typing import TypeVar, List, Any

T = TypeVar('T')


class ModelCollection(list):
    def __init__(self, items: List[T] = None):
        super().__init__(items or [])

    def to_list_dict(self) -> List[dict[str, Any]]:
        return [m.to_dict().to_dict() for m in self]

    def pluck(self, column: str) -> List[Any]:
        """Get a list of values from a specific column"""
        return [model[column] for model in self]

    def where(self, callback) -> 'ModelCollection':
        """Filter the collection using a callback"""
        return ModelCollection([item for item in self if callback(item)])

    def first(self):
        """Get first item from collection"""
        return self[0] if len(self) > 0 else None

    def take(self, n=1):
        return ModelCollection(self[:n])

    def last(self):
        """Get last item from collection"""
        return self[-1] if len(self) > 0 else None
