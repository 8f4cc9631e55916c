"""Thread-safe in-memory keyed storage shared by the catalog and member stores."""

import threading
from typing import Callable, Generic, Iterator, Optional, TypeVar

T = TypeVar("T")


class InMemoryStore(Generic[T]):
    """Maps an identifier to the current value of an entity.

    Values are immutable, so readers get the stored objects themselves;
    every collection returned is a fresh list.
    """

    def __init__(self, key: Callable[[T], str]):
        """Initialize an empty store.

        Args:
            key: Returns the identifier of a value
        """
        self._key = key
        self._values: dict[str, T] = {}
        self._lock = threading.Lock()

    def put(self, value: T) -> None:
        """Insert or replace the value under its identifier."""
        with self._lock:
            self._values[self._key(value)] = value

    def get(self, key: str) -> Optional[T]:
        """Get the value for an identifier, or None."""
        with self._lock:
            return self._values.get(key)

    def all(self) -> list[T]:
        """Snapshot of every value in insertion order."""
        with self._lock:
            return list(self._values.values())

    def filter(self, predicate: Callable[[T], bool]) -> list[T]:
        """Values matching a predicate, in insertion order."""
        return [value for value in self.all() if predicate(value)]

    def remove(self, key: str) -> bool:
        """Delete a value. Returns True if it existed."""
        with self._lock:
            return self._values.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._values.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values

    def __iter__(self) -> Iterator[T]:
        return iter(self.all())
