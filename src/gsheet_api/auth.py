"""Access tokens for the Google Sheets API.

The transport depends only on the ``AuthProvider`` capability: ``token()``
returns the last known bearer token without blocking, ``ensure_valid()``
refreshes it when it is about to expire. Callers await ``ensure_valid()``
before every request.

Two providers are included:
1. ServiceAccountAuth - signed JWT exchange from a service account key file
2. StaticTokenAuth - a pre-obtained token that is never refreshed
"""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import service_account
from loguru import logger
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from gsheet_api.config import SPREADSHEETS_SCOPE
from gsheet_api.exceptions import AuthError

if TYPE_CHECKING:
    from gsheet_api.config import Settings

# Lifetime assumed when the token endpoint does not report an expiry
DEFAULT_TOKEN_LIFETIME = 3600

REFRESH_RETRY_ATTEMPTS = 3


@dataclass
class AccessToken:
    """An OAuth2 bearer token and its expiry.

    Attributes:
        token: The OAuth2 access token for API calls.
        expires_at: Unix timestamp when the token expires.
    """

    token: str
    expires_at: float

    @classmethod
    def from_expires_in(cls, token: str, expires_in: float) -> AccessToken:
        """Create a token from a relative lifetime in seconds."""
        return cls(token=token, expires_at=time.time() + expires_in)

    def is_valid(self, buffer_seconds: int = 10) -> bool:
        """Check if token is still valid with a safety buffer."""
        return time.time() < self.expires_at - buffer_seconds

    def expires_in_seconds(self) -> int:
        """Return seconds until token expires."""
        return max(0, int(self.expires_at - time.time()))


class AuthProvider(ABC):
    """Supplies bearer tokens to the transport."""

    @abstractmethod
    def token(self) -> str:
        """Return the last known access token. Never blocks."""
        ...

    @abstractmethod
    async def ensure_valid(self) -> None:
        """Refresh the access token if it is missing or about to expire.

        Raises:
            AuthError: If a new token cannot be obtained.
        """
        ...


class StaticTokenAuth(AuthProvider):
    """Auth provider for an access token obtained elsewhere.

    Example:
        >>> auth = StaticTokenAuth("ya29...")
    """

    def __init__(self, access_token: str) -> None:
        self._access_token = access_token

    def token(self) -> str:
        return self._access_token

    async def ensure_valid(self) -> None:
        if not self._access_token:
            raise AuthError("No access token configured")


class ServiceAccountAuth(AuthProvider):
    """Auth provider backed by a Google service account.

    The token exchange is performed by google-auth, which is synchronous, so
    it runs in a worker thread. An asyncio lock makes concurrent callers share
    a single refresh.

    Example:
        >>> auth = ServiceAccountAuth.from_file("/path/to/sa.json")
        >>> await auth.ensure_valid()
        >>> auth.token()
        'ya29...'
    """

    def __init__(
        self,
        credentials: Any,
        *,
        refresh_buffer: int = 10,
    ) -> None:
        """Initialize the provider.

        Args:
            credentials: google-auth service account credentials (scoped)
            refresh_buffer: Refresh this many seconds before expiry
        """
        self._credentials = credentials
        self._refresh_buffer = refresh_buffer
        self._access_token: AccessToken | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        *,
        scopes: list[str] | None = None,
        refresh_buffer: int = 10,
    ) -> ServiceAccountAuth:
        """Load credentials from a service account JSON key file.

        Raises:
            AuthError: If the file is missing or is not a service account key.
        """
        key_path = Path(path)
        if not key_path.exists():
            raise AuthError(f"Service account file not found: {key_path}")

        try:
            credentials = service_account.Credentials.from_service_account_file(
                str(key_path),
                scopes=scopes or [SPREADSHEETS_SCOPE],
            )
        except (ValueError, KeyError) as e:
            raise AuthError(f"Invalid service account file {key_path}: {e}") from e

        logger.debug("Loaded service account credentials from {}", key_path)
        return cls(credentials, refresh_buffer=refresh_buffer)

    @classmethod
    def from_settings(cls, settings: Settings) -> ServiceAccountAuth:
        if not settings.service_account_path:
            raise AuthError(
                "No service account configured. Set GSHEET_SERVICE_ACCOUNT_PATH "
                "or SERVICE_ACCOUNT_PATH."
            )
        return cls.from_file(
            settings.service_account_path,
            scopes=settings.scopes,
            refresh_buffer=settings.token_refresh_buffer,
        )

    @property
    def service_account_email(self) -> str:
        return getattr(self._credentials, "service_account_email", "")

    def token(self) -> str:
        if self._access_token is None:
            return ""
        return self._access_token.token

    def _is_fresh(self) -> bool:
        return self._access_token is not None and self._access_token.is_valid(
            self._refresh_buffer
        )

    async def ensure_valid(self) -> None:
        if self._is_fresh():
            return
        async with self._lock:
            # Another task may have refreshed while we waited
            if self._is_fresh():
                return
            self._access_token = await self._refresh()
            logger.info(
                "Refreshed access token for {} (expires in {} seconds)",
                self.service_account_email,
                self._access_token.expires_in_seconds(),
            )

    async def _refresh(self) -> AccessToken:
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(google_exceptions.TransportError),
                stop=stop_after_attempt(REFRESH_RETRY_ATTEMPTS),
                wait=wait_exponential(multiplier=0.5, max=4),
                reraise=True,
            ):
                with attempt:
                    await asyncio.to_thread(
                        self._credentials.refresh, google_requests.Request()
                    )
        except google_exceptions.RefreshError as e:
            logger.error("Token refresh rejected: {}", e)
            raise AuthError(f"Token refresh failed: {e}") from e
        except google_exceptions.TransportError as e:
            logger.error("Token endpoint unreachable: {}", e)
            raise AuthError(f"Failed to reach token endpoint: {e}") from e

        token = self._credentials.token
        if not token:
            raise AuthError("Token endpoint returned no access token")

        expiry = self._credentials.expiry
        if expiry is None:
            expires_at = time.time() + DEFAULT_TOKEN_LIFETIME
        else:
            # google-auth reports expiry as a naive UTC datetime
            if expiry.tzinfo is None:
                expiry = expiry.replace(tzinfo=timezone.utc)
            expires_at = expiry.timestamp()

        return AccessToken(token=token, expires_at=expires_at)
