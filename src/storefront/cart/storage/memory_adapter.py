"""In-memory storage adapter — deterministic store for tests and development.

Can be configured to fail on reads or writes to simulate a full or disabled
browser store.
"""

from storefront.cart.storage.port import KeyValueStorage


class StorageUnavailable(OSError):
    """Raised by the fake when it is configured to fail."""


class InMemoryStorage(KeyValueStorage):
    """Dict-backed storage that succeeds by default."""

    def __init__(self, initial: dict | None = None):
        self.data = dict(initial or {})
        self.fail_reads = False
        self.fail_writes = False
        self.failure_reason = "QuotaExceededError"

    def configure(self, fail_reads: bool = False, fail_writes: bool = False, failure_reason: str = "QuotaExceededError"):
        """Configure the fake storage behaviour for testing."""
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.failure_reason = failure_reason

    def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise StorageUnavailable(self.failure_reason)
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageUnavailable(self.failure_reason)
        self.data[key] = value

    def remove(self, key: str) -> None:
        if self.fail_writes:
            raise StorageUnavailable(self.failure_reason)
        self.data.pop(key, None)
