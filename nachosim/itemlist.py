"""A list of items that can also be kept ordered by an integer key."""

from typing import Any, Callable, Iterator, Optional


class ItemList:
    """Sequence of items, each carrying a sort key.

    Plain `append`/`prepend` give items key 0; `sorted_insert` keeps items in
    increasing key order, placing an item after others with the same key.
    """

    def __init__(self) -> None:
        self._entries: list[tuple[int, Any]] = []

    def prepend(self, item: Any) -> None:
        """Put `item` at the front."""
        self._entries.insert(0, (0, item))

    def append(self, item: Any) -> None:
        """Put `item` at the end."""
        self._entries.append((0, item))

    def head(self) -> Any:
        """Return the first item without removing it."""
        if not self._entries:
            raise IndexError("head of an empty list")
        return self._entries[0][1]

    def pop(self) -> Any:
        """Remove and return the first item, or None if the list is empty."""
        popped = self.sorted_pop()
        return None if popped is None else popped[0]

    def remove(self, item: Any) -> None:
        """Remove the first occurrence of `item`, if there is one."""
        for index, (_, present) in enumerate(self._entries):
            if present == item:
                del self._entries[index]
                return

    def apply(self, func: Callable[[Any], Any]) -> None:
        """Call `func` on every item, front to back."""
        if func is None:
            raise TypeError("func must be callable")
        for _, item in self._entries:
            func(item)

    def has(self, item: Any) -> bool:
        """Whether `item` is on the list."""
        return any(present == item for _, present in self._entries)

    def is_empty(self) -> bool:
        """Whether the list holds no items."""
        return not self._entries

    def sorted_insert(self, item: Any, key: int) -> None:
        """Insert `item` before the first entry whose key exceeds `key`."""
        position = next(
            (i for i, (k, _) in enumerate(self._entries) if key < k),
            len(self._entries),
        )
        self._entries.insert(position, (key, item))

    def sorted_pop(self) -> Optional[tuple[Any, int]]:
        """Remove the first entry and return `(item, key)`, or None if empty."""
        if not self._entries:
            return None
        key, item = self._entries.pop(0)
        return item, key

    def __iter__(self) -> Iterator[Any]:
        return (item for _, item in list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)