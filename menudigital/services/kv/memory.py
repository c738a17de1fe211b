"""
In-Memory Key-Value Store

Development implementation of the shopper store. Data lives in the
process and is lost on restart.
"""

import logging
import threading
import time
from typing import Optional

from menudigital.services.kv.base import BaseKeyValueStore

logger = logging.getLogger(__name__)


class MemoryKeyValueStore(BaseKeyValueStore):
    """Dictionary-backed store with optional per-key expiry."""

    def __init__(self):
        self._data: dict[str, tuple[str, Optional[float]]] = {}
        self._lock = threading.Lock()
        logger.info("MemoryKeyValueStore initialized")

    @property
    def provider_name(self) -> str:
        return "memory"

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at is not None and expires_at <= time.monotonic():
                del self._data[key]
                return None
            return value

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        expires_at = time.monotonic() + ttl if ttl else None
        with self._lock:
            self._data[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def health_check(self) -> bool:
        """Memory store is always available."""
        return True
