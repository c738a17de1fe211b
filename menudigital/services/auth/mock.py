"""
Mock Auth Service

In-memory accounts for development. Passwords are stored as salted
PBKDF2 hashes; sessions are random opaque tokens. Everything is lost
on restart.
"""

import hashlib
import hmac
import logging
import secrets
import threading
import uuid
from typing import Optional

from menudigital.services.auth.base import (
    AuthResult,
    AuthUser,
    BaseAuthService,
    validate_credentials,
)

logger = logging.getLogger(__name__)

_PBKDF2_ROUNDS = 100_000


def _hash_password(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _PBKDF2_ROUNDS)


class MockAuthService(BaseAuthService):
    """Mock authentication service for development."""

    def __init__(self):
        self._users: dict[str, tuple[AuthUser, bytes, bytes]] = {}
        self._sessions: dict[str, str] = {}
        self._lock = threading.Lock()
        logger.info("MockAuthService initialized")

    @property
    def provider_name(self) -> str:
        return "mock"

    def _open_session(self, user: AuthUser) -> str:
        token = secrets.token_urlsafe(32)
        self._sessions[token] = user.email
        return token

    async def sign_up(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
    ) -> AuthResult:
        error = validate_credentials(email, password)
        if error:
            return AuthResult(success=False, error_message=error, provider="mock")

        email = email.strip().lower()
        with self._lock:
            if email in self._users:
                return AuthResult(
                    success=False,
                    error_message="User already registered",
                    provider="mock",
                )

            salt = secrets.token_bytes(16)
            user = AuthUser(id=str(uuid.uuid4()), email=email, name=name)
            self._users[email] = (user, salt, _hash_password(password, salt))
            token = self._open_session(user)

        logger.info(f"Mock sign-up: {email} ({user.id})")
        return AuthResult(success=True, user=user, access_token=token, provider="mock")

    async def sign_in(self, email: str, password: str) -> AuthResult:
        email = (email or "").strip().lower()
        with self._lock:
            record = self._users.get(email)
            if record is None or not hmac.compare_digest(
                record[2], _hash_password(password or "", record[1])
            ):
                logger.warning(f"Mock sign-in rejected for {email}")
                return AuthResult(
                    success=False,
                    error_message="Invalid login credentials",
                    provider="mock",
                )
            user = record[0]
            token = self._open_session(user)

        logger.info(f"Mock sign-in: {email}")
        return AuthResult(success=True, user=user, access_token=token, provider="mock")

    async def sign_out(self, access_token: str) -> bool:
        with self._lock:
            email = self._sessions.pop(access_token, None)
        if email:
            logger.info(f"Mock sign-out: {email}")
        return email is not None

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        with self._lock:
            email = self._sessions.get(access_token)
            if email is None:
                return None
            return self._users[email][0]

    async def health_check(self) -> bool:
        """Mock always returns healthy."""
        return True
