"""
Redis Key-Value Store

Production implementation of the shopper store.
Used when ENV_MODE=production or ENV_MODE=staging.
"""

import logging
from typing import Optional

import redis

from menudigital.core.config import get_settings
from menudigital.services.kv.base import BaseKeyValueStore

logger = logging.getLogger(__name__)


class RedisKeyValueStore(BaseKeyValueStore):
    """Redis-backed store. Values are stored as UTF-8 strings."""

    def __init__(self, url: Optional[str] = None):
        settings = get_settings()
        self._client = redis.Redis.from_url(
            url or settings.redis_url,
            decode_responses=True,
            socket_timeout=2,
        )
        logger.info("RedisKeyValueStore initialized")

    @property
    def provider_name(self) -> str:
        return "redis"

    def get(self, key: str) -> Optional[str]:
        return self._client.get(key)

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        self._client.set(key, value, ex=ttl)

    def delete(self, key: str) -> None:
        self._client.delete(key)

    def health_check(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            return False
