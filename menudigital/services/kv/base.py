"""
Key-Value Store Abstract Base Class

Defines the storage contract used for shopper-side state (carts and
checkout steps). Both MemoryKeyValueStore and RedisKeyValueStore
implement these methods.
"""

from abc import ABC, abstractmethod
from typing import Optional


class BaseKeyValueStore(ABC):
    """Abstract base class for string key-value stores."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g., "memory", "redis")."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        """Store a value, optionally expiring after `ttl` seconds."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Missing keys are not an error."""
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check store connectivity."""
        pass


class SessionStorage:
    """
    One shopper's view of the store.

    Every key is prefixed with the shopper session id, the same way a
    browser's local storage is private to that browser.
    """

    def __init__(self, store: BaseKeyValueStore, session_id: str):
        self.store = store
        self.session_id = session_id

    def _key(self, key: str) -> str:
        return f"session:{self.session_id}:{key}"

    def get(self, key: str) -> Optional[str]:
        return self.store.get(self._key(key))

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        self.store.set(self._key(key), value, ttl=ttl)

    def delete(self, key: str) -> None:
        self.store.delete(self._key(key))
