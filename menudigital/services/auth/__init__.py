"""
Auth Service Factory

Returns Mock or Supabase auth service based on ENV_MODE.
"""

import logging
from functools import lru_cache

from menudigital.core.config import get_settings
from menudigital.services.auth.base import (
    AuthResult,
    AuthUser,
    BaseAuthService,
)
from menudigital.services.auth.mock import MockAuthService
from menudigital.services.auth.supabase import SupabaseAuthService

logger = logging.getLogger(__name__)


@lru_cache()
def get_auth_service() -> BaseAuthService:
    """Get the configured auth service."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Auth Service: Using MockAuthService (development mode)")
        return MockAuthService()
    else:
        logger.info(f"Auth Service: Using SupabaseAuthService ({settings.env_mode.value} mode)")
        return SupabaseAuthService()


def reset_auth_service() -> None:
    """Clear the cached service instance."""
    get_auth_service.cache_clear()


__all__ = [
    "get_auth_service",
    "reset_auth_service",
    "BaseAuthService",
    "AuthResult",
    "AuthUser",
    "MockAuthService",
    "SupabaseAuthService",
]
