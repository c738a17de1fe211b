"""
Auth Service Abstract Base Class

Defines the interface for account authentication. Both the in-memory
development implementation and the Supabase implementation provide
these operations.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

MIN_PASSWORD_LENGTH = 6

_EMAIL_RE = re.compile(r"^[\w\.\+-]+@[\w\.-]+\.\w+$")


@dataclass
class AuthUser:
    """Authenticated account."""
    id: str
    email: str
    name: Optional[str] = None


@dataclass
class AuthResult:
    """
    Result from a sign-up or sign-in.

    Attributes:
        success: Whether the operation succeeded
        user: The account, when successful
        access_token: Bearer token for admin requests
        error_message: Provider or validation message on failure
    """
    success: bool
    user: Optional[AuthUser] = None
    access_token: Optional[str] = None
    error_message: Optional[str] = None
    provider: str = "unknown"


def validate_credentials(email: str, password: str) -> Optional[str]:
    """Return an error message for unusable credentials, else None."""
    if not _EMAIL_RE.match(email or ""):
        return "Email inválido"
    if len(password or "") < MIN_PASSWORD_LENGTH:
        return f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres"
    return None


class BaseAuthService(ABC):
    """Abstract base class for authentication services."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def sign_up(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
    ) -> AuthResult:
        """Create an account and open a session for it."""
        pass

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthResult:
        """Open a session with email and password."""
        pass

    @abstractmethod
    async def sign_out(self, access_token: str) -> bool:
        """Invalidate a session token."""
        pass

    @abstractmethod
    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        """Resolve a session token to its user, or None when invalid."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check service connectivity."""
        pass
