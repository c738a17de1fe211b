"""
Key-Value Store Factory

Returns the in-memory store in development and Redis otherwise.

Usage:
    from menudigital.services.kv import get_kv_store, SessionStorage

    storage = SessionStorage(get_kv_store(), session_id)
"""

import logging
from functools import lru_cache

from menudigital.core.config import get_settings
from menudigital.services.kv.base import BaseKeyValueStore, SessionStorage
from menudigital.services.kv.memory import MemoryKeyValueStore
from menudigital.services.kv.redis_store import RedisKeyValueStore

logger = logging.getLogger(__name__)


@lru_cache()
def get_kv_store() -> BaseKeyValueStore:
    """Get the configured key-value store."""
    settings = get_settings()

    if settings.is_development:
        logger.info("KV Store: Using MemoryKeyValueStore (development mode)")
        return MemoryKeyValueStore()
    else:
        logger.info(f"KV Store: Using RedisKeyValueStore ({settings.env_mode.value} mode)")
        return RedisKeyValueStore()


def reset_kv_store() -> None:
    """Clear the cached store instance."""
    get_kv_store.cache_clear()


__all__ = [
    "get_kv_store",
    "reset_kv_store",
    "BaseKeyValueStore",
    "SessionStorage",
    "MemoryKeyValueStore",
    "RedisKeyValueStore",
]
