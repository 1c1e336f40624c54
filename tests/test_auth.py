"""Tests for access token providers."""

from __future__ import annotations

import asyncio
import json
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest
from google.auth import exceptions as google_exceptions

from gsheet_api import AccessToken, AuthError, ServiceAccountAuth, StaticTokenAuth
from gsheet_api.config import Settings


class FakeCredentials:
    """Stands in for google.oauth2.service_account.Credentials."""

    service_account_email = "robot@example.iam.gserviceaccount.com"

    def __init__(
        self,
        *,
        lifetime: timedelta = timedelta(hours=1),
        failures: list[Exception] | None = None,
        token: str | None = "ya29.fake",
    ) -> None:
        self.token: str | None = None
        self.expiry: datetime | None = None
        self.refresh_count = 0
        self._lifetime = lifetime
        self._failures = list(failures or [])
        self._token = token

    def refresh(self, request: Any) -> None:
        self.refresh_count += 1
        if self._failures:
            raise self._failures.pop(0)
        self.token = self._token
        # google-auth stores a naive UTC datetime
        self.expiry = (datetime.now(timezone.utc) + self._lifetime).replace(
            tzinfo=None
        )


class TestAccessToken:
    """Tests for AccessToken."""

    def test_valid_token(self) -> None:
        token = AccessToken.from_expires_in("abc", 3600)
        assert token.is_valid()
        assert 3590 <= token.expires_in_seconds() <= 3600

    def test_expiring_token_is_invalid(self) -> None:
        token = AccessToken.from_expires_in("abc", 5)
        assert not token.is_valid(buffer_seconds=10)

    def test_expired_token(self) -> None:
        token = AccessToken(token="abc", expires_at=time.time() - 1)
        assert not token.is_valid()
        assert token.expires_in_seconds() == 0


class TestStaticTokenAuth:
    """Tests for StaticTokenAuth."""

    async def test_returns_token(self) -> None:
        auth = StaticTokenAuth("ya29.static")
        await auth.ensure_valid()
        assert auth.token() == "ya29.static"

    async def test_empty_token(self) -> None:
        with pytest.raises(AuthError):
            await StaticTokenAuth("").ensure_valid()


class TestServiceAccountAuth:
    """Tests for ServiceAccountAuth."""

    def test_token_empty_before_refresh(self) -> None:
        auth = ServiceAccountAuth(FakeCredentials())
        assert auth.token() == ""

    async def test_ensure_valid_refreshes(self) -> None:
        credentials = FakeCredentials()
        auth = ServiceAccountAuth(credentials)

        await auth.ensure_valid()

        assert auth.token() == "ya29.fake"
        assert credentials.refresh_count == 1

    async def test_fresh_token_is_reused(self) -> None:
        credentials = FakeCredentials()
        auth = ServiceAccountAuth(credentials)

        await auth.ensure_valid()
        await auth.ensure_valid()

        assert credentials.refresh_count == 1

    async def test_token_inside_buffer_is_refreshed(self) -> None:
        credentials = FakeCredentials(lifetime=timedelta(seconds=5))
        auth = ServiceAccountAuth(credentials, refresh_buffer=10)

        await auth.ensure_valid()
        await auth.ensure_valid()

        assert credentials.refresh_count == 2

    async def test_concurrent_callers_share_one_refresh(self) -> None:
        credentials = FakeCredentials()
        auth = ServiceAccountAuth(credentials)

        await asyncio.gather(*(auth.ensure_valid() for _ in range(10)))

        assert credentials.refresh_count == 1
        assert auth.token() == "ya29.fake"

    async def test_transient_transport_error_is_retried(self) -> None:
        credentials = FakeCredentials(
            failures=[google_exceptions.TransportError("connection reset")]
        )
        auth = ServiceAccountAuth(credentials)

        await auth.ensure_valid()

        assert credentials.refresh_count == 2
        assert auth.token() == "ya29.fake"

    async def test_refresh_rejected(self) -> None:
        credentials = FakeCredentials(
            failures=[google_exceptions.RefreshError("invalid_grant")]
        )
        auth = ServiceAccountAuth(credentials)

        with pytest.raises(AuthError, match="invalid_grant"):
            await auth.ensure_valid()
        assert credentials.refresh_count == 1

    async def test_empty_token_from_endpoint(self) -> None:
        auth = ServiceAccountAuth(FakeCredentials(token=None))

        with pytest.raises(AuthError, match="no access token"):
            await auth.ensure_valid()

    def test_service_account_email(self) -> None:
        auth = ServiceAccountAuth(FakeCredentials())
        assert auth.service_account_email == "robot@example.iam.gserviceaccount.com"

    def test_from_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(AuthError, match="not found"):
            ServiceAccountAuth.from_file(tmp_path / "missing.json")

    def test_from_file_not_a_key(self, tmp_path: Path) -> None:
        key_file = tmp_path / "sa.json"
        key_file.write_text(json.dumps({"type": "service_account"}))

        with pytest.raises(AuthError, match="Invalid service account file"):
            ServiceAccountAuth.from_file(key_file)

    def test_from_settings_without_path(self) -> None:
        settings = Settings(service_account_path=None, _env_file=None)

        with pytest.raises(AuthError, match="No service account configured"):
            ServiceAccountAuth.from_settings(settings)
