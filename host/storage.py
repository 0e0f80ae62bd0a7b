"""Key-value persistence substrate.

The registry and player preferences are stored as opaque string blobs
under well-known keys.  Any backend that can get and set a string by name
can serve as storage; the server uses the SQL-backed store in
``server.database``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """String-valued key-value slot storage."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored under ``key``, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Overwrite the value under ``key`` in a single write.

        Raises on storage failure; the previous value must then be left
        untouched.
        """


class MemoryKeyValueStore(KeyValueStore):
    """Dict-backed store for tests and the simulated host."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"Value for '{key}' must be a string, got {type(value).__name__}")
        self._data[key] = value

    def keys(self) -> list[str]:
        return list(self._data)
