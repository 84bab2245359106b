"""Client-local key-value storage used to persist the cart between sessions."""

from storefront.cart.storage.file_adapter import JsonFileStorage
from storefront.cart.storage.memory_adapter import InMemoryStorage
from storefront.cart.storage.port import KeyValueStorage

__all__ = ["InMemoryStorage", "JsonFileStorage", "KeyValueStorage"]
