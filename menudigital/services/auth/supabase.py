"""
Supabase Auth Service

Production implementation using the Supabase GoTrue REST API.
Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - SUPABASE_URL and SUPABASE_ANON_KEY must be set

API Documentation:
    https://supabase.com/docs/reference/api
"""

import logging
from typing import Any, Optional

import httpx

from menudigital.core.config import get_settings
from menudigital.services.auth.base import (
    AuthResult,
    AuthUser,
    BaseAuthService,
    validate_credentials,
)

logger = logging.getLogger(__name__)


class SupabaseAuthService(BaseAuthService):
    """Authentication backed by a Supabase project."""

    def __init__(self):
        """
        Raises:
            ValueError: If the Supabase URL or anon key is not configured
        """
        settings = get_settings()

        if not settings.supabase_url or not settings.supabase_anon_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_ANON_KEY are required for production mode. "
                "Set them in your .env file or environment variables."
            )

        self._base_url = f"{settings.supabase_url}/auth/v1"
        self._api_key = settings.supabase_anon_key
        self._timeout = settings.http_timeout_seconds
        self._redirect_to = f"{settings.public_base_url}/admin"

        logger.info("SupabaseAuthService initialized")

    @property
    def provider_name(self) -> str:
        return "supabase"

    def _headers(self, access_token: Optional[str] = None) -> dict[str, str]:
        headers = {"apikey": self._api_key}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    @staticmethod
    def _to_user(data: dict[str, Any]) -> AuthUser:
        metadata = data.get("user_metadata") or {}
        return AuthUser(id=data["id"], email=data.get("email", ""), name=metadata.get("name"))

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"Auth error ({response.status_code})"
        return (
            body.get("msg")
            or body.get("error_description")
            or body.get("message")
            or f"Auth error ({response.status_code})"
        )

    def _session_result(self, body: dict[str, Any]) -> AuthResult:
        # Sign-up with e-mail confirmation enabled returns the bare user
        user_data = body.get("user") or body
        return AuthResult(
            success=True,
            user=self._to_user(user_data),
            access_token=body.get("access_token"),
            provider="supabase",
        )

    async def sign_up(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
    ) -> AuthResult:
        error = validate_credentials(email, password)
        if error:
            return AuthResult(success=False, error_message=error, provider="supabase")

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    f"{self._base_url}/signup",
                    params={"redirect_to": self._redirect_to},
                    headers=self._headers(),
                    json={"email": email, "password": password, "data": {"name": name}},
                )
        except httpx.HTTPError as e:
            logger.error(f"Supabase sign-up request failed: {e}")
            return AuthResult(success=False, error_message=str(e), provider="supabase")

        if response.status_code >= 400:
            return AuthResult(
                success=False,
                error_message=self._error_message(response),
                provider="supabase",
            )

        logger.info(f"Supabase sign-up: {email}")
        return self._session_result(response.json())

    async def sign_in(self, email: str, password: str) -> AuthResult:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    f"{self._base_url}/token",
                    params={"grant_type": "password"},
                    headers=self._headers(),
                    json={"email": email, "password": password},
                )
        except httpx.HTTPError as e:
            logger.error(f"Supabase sign-in request failed: {e}")
            return AuthResult(success=False, error_message=str(e), provider="supabase")

        if response.status_code >= 400:
            logger.warning(f"Supabase sign-in rejected for {email}")
            return AuthResult(
                success=False,
                error_message=self._error_message(response),
                provider="supabase",
            )

        logger.info(f"Supabase sign-in: {email}")
        return self._session_result(response.json())

    async def sign_out(self, access_token: str) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    f"{self._base_url}/logout",
                    headers=self._headers(access_token),
                )
        except httpx.HTTPError as e:
            logger.error(f"Supabase sign-out request failed: {e}")
            return False
        return response.status_code < 400

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(
                    f"{self._base_url}/user",
                    headers=self._headers(access_token),
                )
        except httpx.HTTPError as e:
            logger.error(f"Supabase user lookup failed: {e}")
            return None

        if response.status_code != 200:
            return None
        return self._to_user(response.json())

    async def health_check(self) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(f"{self._base_url}/health", headers=self._headers())
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.error(f"Supabase auth health check failed: {e}")
            return False
