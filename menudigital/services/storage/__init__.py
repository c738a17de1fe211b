"""
Storage Service Factory

Returns local-disk or Supabase storage based on ENV_MODE.
"""

import logging
from functools import lru_cache

from menudigital.core.config import get_settings
from menudigital.services.storage.base import BaseStorageService, UploadResult
from menudigital.services.storage.local import LocalStorageService
from menudigital.services.storage.supabase import SupabaseStorageService

logger = logging.getLogger(__name__)


@lru_cache()
def get_storage_service() -> BaseStorageService:
    """Get the configured storage service."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Storage Service: Using LocalStorageService (development mode)")
        return LocalStorageService()
    else:
        logger.info(f"Storage Service: Using SupabaseStorageService ({settings.env_mode.value} mode)")
        return SupabaseStorageService()


def reset_storage_service() -> None:
    """Clear the cached service instance."""
    get_storage_service.cache_clear()


__all__ = [
    "get_storage_service",
    "reset_storage_service",
    "BaseStorageService",
    "UploadResult",
    "LocalStorageService",
    "SupabaseStorageService",
]
