"""
Local Storage Service

Development implementation writing uploads to disk. Files are served by
the app under /static/uploads.
"""

import logging
from pathlib import Path, PurePosixPath
from typing import Optional

from menudigital.core.config import get_settings
from menudigital.services.storage.base import BaseStorageService, UploadResult

logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/static/uploads"


class LocalStorageService(BaseStorageService):
    """Stores objects under <root>/<bucket>/<path>."""

    def __init__(self, root: Optional[str] = None, bucket: Optional[str] = None):
        settings = get_settings()
        self.root = Path(root or settings.local_storage_directory)
        self.bucket = bucket or settings.logo_bucket
        self._base_url = settings.public_base_url
        logger.info(f"LocalStorageService initialized (root={self.root})")

    @property
    def provider_name(self) -> str:
        return "local"

    def _resolve(self, path: str) -> Path:
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"Invalid object path: {path}")
        return self.root / self.bucket / Path(*relative.parts)

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> UploadResult:
        try:
            target = self._resolve(path)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except (OSError, ValueError) as e:
            logger.error(f"Local upload failed for {path}: {e}")
            return UploadResult(success=False, error_message=str(e), provider="local")

        logger.info(f"Stored {len(data)} bytes at {target}")
        return UploadResult(
            success=True,
            path=path,
            public_url=self.public_url(path),
            provider="local",
        )

    def public_url(self, path: str) -> str:
        return f"{self._base_url}{UPLOADS_URL_PREFIX}/{self.bucket}/{path}"

    async def health_check(self) -> bool:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            return True
        except OSError as e:
            logger.error(f"Local storage unavailable: {e}")
            return False
