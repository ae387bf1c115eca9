"""A small map from non-negative integers to items, reusing freed slots."""

import bisect
from typing import Any, Optional


class TableFullError(Exception):
    """Raised when a table has no free index left."""


class Table:
    """Fixed-capacity table handing out the lowest free index to new items."""

    SIZE = 20

    def __init__(self, size: int = SIZE) -> None:
        self._size = size
        self._data: list[Any] = [None] * size
        self._current = 0
        self._freed: list[int] = []

    @staticmethod
    def _check_index(index: int) -> None:
        if index < 0:
            raise ValueError(f"negative table index {index}")

    def add(self, item: Any) -> int:
        """Store `item` at a free index and return the index."""
        if self._freed:
            index = self._freed.pop(0)
        elif self._current < self._size:
            index = self._current
            self._current += 1
        else:
            raise TableFullError(f"table of {self._size} entries is full")
        self._data[index] = item
        return index

    def get(self, index: int) -> Any:
        """Return the item at `index`, or None if the index is unoccupied."""
        self._check_index(index)
        return self._data[index] if self.has_key(index) else None

    def has_key(self, index: int) -> bool:
        """Whether `index` holds an item."""
        self._check_index(index)
        return index < self._current and index not in self._freed

    def is_empty(self) -> bool:
        """Whether the table holds no items."""
        return self._current == 0

    def remove(self, index: int) -> Optional[Any]:
        """Remove and return the item at `index`, or None if unoccupied."""
        self._check_index(index)
        if not self.has_key(index):
            return None
        if index == self._current - 1:
            self._current -= 1
            while self._current > 0 and not self.has_key(self._current - 1):
                self._freed.remove(self._current - 1)
                self._current -= 1
        else:
            bisect.insort(self._freed, index)
        item = self._data[index]
        self._data[index] = None
        return item

    def update(self, index: int, item: Any) -> Any:
        """Replace the item at an occupied `index` and return the old one."""
        self._check_index(index)
        if not self.has_key(index):
            raise KeyError(index)
        previous = self._data[index]
        self._data[index] = item
        return previous