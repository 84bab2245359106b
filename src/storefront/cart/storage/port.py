"""Key-value storage port — the durable store the cart is written to.

Implementations are best-effort: ``set`` and ``remove`` may raise when the
backing store is full or disabled, and callers are expected to absorb that.
"""

from abc import ABC, abstractmethod


class KeyValueStorage(ABC):
    """Abstract string-to-string store."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``. Removing an absent key is not an error."""
        ...
