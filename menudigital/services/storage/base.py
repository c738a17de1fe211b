"""
Storage Service Abstract Base Class

Binary object upload and public URL retrieval, used for company logos.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class UploadResult:
    """Result from an upload."""
    success: bool
    path: Optional[str] = None
    public_url: Optional[str] = None
    error_message: Optional[str] = None
    provider: str = "unknown"


class BaseStorageService(ABC):
    """Abstract base class for object storage services."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> UploadResult:
        """Store `data` at `path` inside the bucket."""
        pass

    @abstractmethod
    def public_url(self, path: str) -> str:
        """Public URL of a stored object."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check service connectivity."""
        pass
