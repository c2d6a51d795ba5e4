"""Shared advisory types."""

from enum import Enum
from typing import List, TypeVar

T = TypeVar('T')


class Priority(Enum):
    """Recommendation priority, high first when sorted."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def sort_order(self) -> int:
        return _PRIORITY_ORDER[self]


_PRIORITY_ORDER = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
}


def sort_by_priority(items: List[T]) -> List[T]:
    """Stable sort of items carrying a `priority` attribute."""
    return sorted(items, key=lambda item: item.priority.sort_order)
