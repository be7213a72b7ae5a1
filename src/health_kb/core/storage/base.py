"""Slot storage interface for persisted snapshots."""

from abc import ABC, abstractmethod


class StorageBackend(ABC):
    """Abstract durable key-value store holding whole snapshots by slot name.

    Implementations raise their own I/O errors; callers decide whether a
    failure is fatal.
    """

    @abstractmethod
    def read(self, slot: str) -> str | None:
        """Return the content of ``slot``, or None if it was never written."""
        ...

    @abstractmethod
    def write(self, slot: str, data: str) -> None:
        """Replace the content of ``slot`` with ``data``."""
        ...

    @abstractmethod
    def delete(self, slot: str) -> bool:
        """Remove ``slot``. Returns True if it existed."""
        ...

    def close(self) -> None:
        """Clean up resources."""
