"""
Chainable in-memory result set.

Domain collections (alerts) subclass this and add named filters built on
filter(); every narrowing operation returns an instance of the subclass so
the named filters stay chainable.
"""

from typing import TypeVar, Generic, Callable, Iterable, Iterator, List, Dict, Optional, Any

T = TypeVar('T')


class QueryableCollection(Generic[T]):
    """
    Ordered, immutable-by-convention sequence of results.

    Examples:
        alerts.active_at(now).severe().by_severity().first()
        alerts.where(location="LFPN").count()
    """

    def __init__(self, items: Iterable[T] = ()):
        self._items: List[T] = list(items)

    def _derive(self, items: Iterable[T]) -> 'QueryableCollection[T]':
        return self.__class__(items)

    def filter(self, predicate: Callable[[T], bool]) -> 'QueryableCollection[T]':
        """Keep the items for which predicate is true, in their current order."""
        return self._derive(item for item in self._items if predicate(item))

    def where(self, **attributes) -> 'QueryableCollection[T]':
        """Keep the items whose attributes equal every given value."""
        return self.filter(
            lambda item: all(getattr(item, name, None) == value for name, value in attributes.items())
        )

    def order_by(self, key_func: Callable[[T], Any], reverse: bool = False) -> 'QueryableCollection[T]':
        """
        Sort by key_func.

        The sort is stable in both directions: items with equal keys keep
        their relative order even when reverse is True.
        """
        return self._derive(sorted(self._items, key=key_func, reverse=reverse))

    def take(self, n: int) -> 'QueryableCollection[T]':
        return self._derive(self._items[:n])

    def group_by(self, key_func: Callable[[T], Any]) -> Dict[Any, List[T]]:
        groups: Dict[Any, List[T]] = {}
        for item in self._items:
            groups.setdefault(key_func(item), []).append(item)
        return groups

    def first(self) -> Optional[T]:
        return self._items[0] if self._items else None

    def last(self) -> Optional[T]:
        return self._items[-1] if self._items else None

    def all(self) -> List[T]:
        return list(self._items)

    def count(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._derive(self._items[index])
        return self._items[index]

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(count={len(self._items)})"
