from collections import deque
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

from statuspage_updates.errors import InvalidCapacity

T = TypeVar("T")


class BoundedHistory(Generic[T]):
    """
    Fixed-capacity FIFO of the most recent items, oldest first.

    Inserting past capacity evicts from the front, so the surviving items
    keep their insertion order. Items are never removed by value.

    Not safe for concurrent mutation; the owning poller serialises access
    on its event loop.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise InvalidCapacity(capacity)
        self._capacity = capacity
        self._items: deque[T] = deque()

    @property
    def capacity(self) -> int:
        return self._capacity

    def insert(self, item: T) -> None:
        self._items.append(item)
        while len(self._items) > self._capacity:
            self._items.popleft()

    def contains(self, predicate: Callable[[T], bool]) -> bool:
        """True iff some stored item satisfies predicate."""
        return any(predicate(item) for item in self._items)

    def to_list(self) -> list[T]:
        """Copy of the current contents, oldest first."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.to_list())

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __repr__(self) -> str:
        return f"BoundedHistory(capacity={self._capacity}, items={self.to_list()!r})"
