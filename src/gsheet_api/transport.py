"""Transport layer for the Google Sheets API.

Defines the Transport protocol and implementations:
- GoogleSheetsTransport: Production transport using the Google Sheets API
- LocalFileTransport: Test transport reading from local golden files

Transports return raw JSON dicts; mapping to typed models happens in the
client.
"""

from __future__ import annotations

import json
import re
import ssl
import urllib.parse
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

import certifi
import httpx
from loguru import logger

from gsheet_api.config import DEFAULT_API_BASE_URL
from gsheet_api.exceptions import (
    APIError,
    AuthenticationError,
    DeserializationError,
    NotFoundError,
    TransportError,
)

if TYPE_CHECKING:
    from gsheet_api import api_types
    from gsheet_api.auth import AuthProvider

DEFAULT_TIMEOUT = 60


class Transport(ABC):
    """Abstract base class for spreadsheet transport.

    Implementations fetch and update spreadsheet data from a source
    (Google API, local files, etc.).
    """

    @abstractmethod
    async def get_spreadsheet(
        self,
        spreadsheet_id: str,
        params: list[tuple[str, str]] | None = None,
    ) -> api_types.Spreadsheet:
        """Fetch spreadsheet metadata.

        Args:
            spreadsheet_id: The spreadsheet identifier
            params: Query parameters (ranges, includeGridData, ...)
        """
        ...

    @abstractmethod
    async def get_values(
        self,
        spreadsheet_id: str,
        range_text: str,
        params: list[tuple[str, str]] | None = None,
    ) -> api_types.ValueRange:
        """Fetch the values of a single A1 range (or a whole sheet by title)."""
        ...

    @abstractmethod
    async def batch_get_values(
        self,
        spreadsheet_id: str,
        ranges: list[str],
        params: list[tuple[str, str]] | None = None,
    ) -> api_types.BatchGetValuesResponse:
        """Fetch the values of several A1 ranges in one request."""
        ...

    @abstractmethod
    async def batch_update_values(
        self,
        spreadsheet_id: str,
        body: api_types.BatchUpdateValuesRequest,
    ) -> api_types.BatchUpdateValuesResponse:
        """Write the values of several A1 ranges in one request."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        ...


class GoogleSheetsTransport(Transport):
    """Production transport that talks to the Google Sheets API.

    Handles authentication headers, SSL, and HTTP error mapping. The auth
    provider is asked to refresh its token before every request.
    """

    def __init__(
        self,
        auth: AuthProvider,
        *,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            auth: Provider of bearer tokens
            base_url: Spreadsheets endpoint, without trailing slash
            timeout: Request timeout in seconds
            client: Optional preconfigured HTTP client. It is not closed by
                ``close()``.
        """
        self._auth = auth
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        if client is None:
            ssl_context = ssl.create_default_context(cafile=certifi.where())
            client = httpx.AsyncClient(
                timeout=timeout,
                verify=ssl_context,
                headers={"Accept": "application/json"},
            )
        self._client = client

    async def get_spreadsheet(
        self,
        spreadsheet_id: str,
        params: list[tuple[str, str]] | None = None,
    ) -> api_types.Spreadsheet:
        url = f"{self._base_url}/{_quote(spreadsheet_id)}"
        result = await self._request("GET", url, params=params)
        return cast("api_types.Spreadsheet", result)

    async def get_values(
        self,
        spreadsheet_id: str,
        range_text: str,
        params: list[tuple[str, str]] | None = None,
    ) -> api_types.ValueRange:
        url = f"{self._base_url}/{_quote(spreadsheet_id)}/values/{_quote(range_text)}"
        result = await self._request("GET", url, params=params)
        return cast("api_types.ValueRange", result)

    async def batch_get_values(
        self,
        spreadsheet_id: str,
        ranges: list[str],
        params: list[tuple[str, str]] | None = None,
    ) -> api_types.BatchGetValuesResponse:
        url = f"{self._base_url}/{_quote(spreadsheet_id)}/values:batchGet"
        query = [("ranges", r) for r in ranges] + list(params or [])
        result = await self._request("GET", url, params=query)
        return cast("api_types.BatchGetValuesResponse", result)

    async def batch_update_values(
        self,
        spreadsheet_id: str,
        body: api_types.BatchUpdateValuesRequest,
    ) -> api_types.BatchUpdateValuesResponse:
        url = f"{self._base_url}/{_quote(spreadsheet_id)}/values:batchUpdate"
        result = await self._request("POST", url, json_body=dict(body))
        return cast("api_types.BatchUpdateValuesResponse", result)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated request and decode the JSON response."""
        await self._auth.ensure_valid()
        headers = {"Authorization": f"Bearer {self._auth.token()}"}

        try:
            response = await self._client.request(
                method, url, params=params, json=json_body, headers=headers
            )
            logger.debug(
                "{} {} -> {}", method, response.request.url.path, response.status_code
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 401:
                raise AuthenticationError("Invalid or expired access token") from e
            if status == 403:
                raise AuthenticationError(
                    "Access denied. Check your scopes and permissions."
                ) from e
            if status == 404:
                raise NotFoundError(
                    "Spreadsheet not found. Check the ID and sharing permissions."
                ) from e
            body = e.response.text
            raise APIError(f"API error ({status}): {body}", status_code=status) from e
        except httpx.RequestError as e:
            raise TransportError(f"Network error: {e}") from e

        try:
            result = response.json()
        except ValueError as e:
            raise DeserializationError(f"Response is not valid JSON: {e}") from e
        if not isinstance(result, dict):
            raise DeserializationError(
                f"Expected a JSON object, got {type(result).__name__}"
            )
        return result

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()


class LocalFileTransport(Transport):
    """Test transport that reads from local golden files.

    Expected directory structure:
        golden_dir/
            <spreadsheet_id>/
                spreadsheet.json
                values/
                    <range>.json

    Value files are named after the requested range with the sheet quoting
    removed and "!" and ":" replaced by "_", e.g. ``Sheet1.json`` or
    ``Sheet1_A1_B2.json``. Updates are
    recorded in ``batch_updates`` instead of being applied.
    """

    def __init__(self, golden_dir: Path) -> None:
        """Initialize the transport.

        Args:
            golden_dir: Directory containing golden test files
        """
        self._golden_dir = golden_dir
        self.batch_updates: list[dict[str, Any]] = []

    async def get_spreadsheet(
        self,
        spreadsheet_id: str,
        params: list[tuple[str, str]] | None = None,
    ) -> api_types.Spreadsheet:
        path = self._golden_dir / spreadsheet_id / "spreadsheet.json"
        return cast("api_types.Spreadsheet", self._read_json(path))

    async def get_values(
        self,
        spreadsheet_id: str,
        range_text: str,
        params: list[tuple[str, str]] | None = None,
    ) -> api_types.ValueRange:
        path = self._values_path(spreadsheet_id, range_text)
        return cast("api_types.ValueRange", self._read_json(path))

    async def batch_get_values(
        self,
        spreadsheet_id: str,
        ranges: list[str],
        params: list[tuple[str, str]] | None = None,
    ) -> api_types.BatchGetValuesResponse:
        value_ranges = [
            cast(
                "api_types.ValueRange",
                self._read_json(self._values_path(spreadsheet_id, r)),
            )
            for r in ranges
        ]
        return {"spreadsheetId": spreadsheet_id, "valueRanges": value_ranges}

    async def batch_update_values(
        self,
        spreadsheet_id: str,
        body: api_types.BatchUpdateValuesRequest,
    ) -> api_types.BatchUpdateValuesResponse:
        self.batch_updates.append({"spreadsheet_id": spreadsheet_id, "body": body})

        responses: list[api_types.UpdateValuesResponse] = []
        for value_range in body.get("data", []):
            values = value_range.get("values", [])
            rows = len(values)
            columns = max((len(row) for row in values), default=0)
            responses.append(
                {
                    "spreadsheetId": spreadsheet_id,
                    "updatedRange": value_range.get("range", ""),
                    "updatedRows": rows,
                    "updatedColumns": columns,
                    "updatedCells": sum(len(row) for row in values),
                }
            )

        return {
            "spreadsheetId": spreadsheet_id,
            "totalUpdatedRows": sum(r["updatedRows"] for r in responses),
            "totalUpdatedColumns": max(
                (r["updatedColumns"] for r in responses), default=0
            ),
            "totalUpdatedCells": sum(r["updatedCells"] for r in responses),
            "totalUpdatedSheets": 1 if responses else 0,
            "responses": responses,
        }

    async def close(self) -> None:
        """No-op for local file transport."""
        pass

    def _values_path(self, spreadsheet_id: str, range_text: str) -> Path:
        name = re.sub(r"[!:]", "_", range_text.replace("'", ""))
        return self._golden_dir / spreadsheet_id / "values" / f"{name}.json"

    @staticmethod
    def _read_json(path: Path) -> dict[str, Any]:
        if not path.exists():
            raise NotFoundError(f"Golden file not found: {path}")
        try:
            result: dict[str, Any] = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            raise DeserializationError(f"Invalid JSON in {path}: {e}") from e
        return result


def _quote(segment: str) -> str:
    """Percent-encode a URL path segment (sheet names may contain spaces)."""
    return urllib.parse.quote(segment, safe="")
