"""
Supabase Storage Service

Production implementation using the Supabase Storage REST API.
Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - SUPABASE_URL and SUPABASE_SERVICE_KEY must be set
    - The logo bucket must exist and be public
"""

import logging

import httpx

from menudigital.core.config import get_settings
from menudigital.services.storage.base import BaseStorageService, UploadResult

logger = logging.getLogger(__name__)


class SupabaseStorageService(BaseStorageService):
    """Object storage backed by a Supabase bucket."""

    def __init__(self):
        settings = get_settings()

        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required for production mode. "
                "Set them in your .env file or environment variables."
            )

        self._base_url = f"{settings.supabase_url}/storage/v1"
        self._key = settings.supabase_service_key
        self._timeout = settings.http_timeout_seconds
        self.bucket = settings.logo_bucket

        logger.info(f"SupabaseStorageService initialized (bucket={self.bucket})")

    @property
    def provider_name(self) -> str:
        return "supabase"

    def _headers(self) -> dict[str, str]:
        return {"apikey": self._key, "Authorization": f"Bearer {self._key}"}

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> UploadResult:
        headers = self._headers()
        headers["Content-Type"] = content_type

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    f"{self._base_url}/object/{self.bucket}/{path}",
                    headers=headers,
                    content=data,
                )
        except httpx.HTTPError as e:
            logger.error(f"Supabase upload failed for {path}: {e}")
            return UploadResult(success=False, error_message=str(e), provider="supabase")

        if response.status_code >= 400:
            logger.error(f"Supabase upload rejected for {path}: {response.status_code} {response.text}")
            return UploadResult(
                success=False,
                error_message=f"Upload rejected ({response.status_code})",
                provider="supabase",
            )

        logger.info(f"Uploaded {path} to bucket {self.bucket}")
        return UploadResult(
            success=True,
            path=path,
            public_url=self.public_url(path),
            provider="supabase",
        )

    def public_url(self, path: str) -> str:
        return f"{self._base_url}/object/public/{self.bucket}/{path}"

    async def health_check(self) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(
                    f"{self._base_url}/bucket/{self.bucket}",
                    headers=self._headers(),
                )
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.error(f"Supabase storage health check failed: {e}")
            return False
