"""Exceptions raised by gsheet_api.

A1 notation and reconciliation errors are raised before any request is
sent (range validation) or before a response is interpreted (cell
reconciliation). Transport and auth errors are raised by the request layer.
"""

from __future__ import annotations


class GSheetError(Exception):
    """Base exception for all gsheet_api errors."""


class A1NotationError(GSheetError, ValueError):
    """Base exception for malformed A1 notation."""

    def __init__(self, text: str, reason: str) -> None:
        self.text = text
        self.reason = reason
        super().__init__(f"Invalid A1 notation {text!r}: {reason}")


class InvalidReferenceError(A1NotationError):
    """Raised when a single cell reference like "B3" cannot be parsed."""


class InvalidRangeError(A1NotationError):
    """Raised when a composite range like "Sheet1!A1:B10" is malformed."""


class MissingRangeError(GSheetError):
    """Raised when a ValueRange has no range to interpret its values against."""

    def __init__(self) -> None:
        super().__init__("ValueRange.range is missing")


class DeserializationError(GSheetError):
    """Raised when an API payload does not have the expected shape."""


class AuthError(GSheetError):
    """Raised when an access token cannot be obtained or refreshed."""


class TransportError(GSheetError):
    """Base exception for transport errors."""


class AuthenticationError(TransportError):
    """Raised when the API rejects the credentials (401/403)."""


class NotFoundError(TransportError):
    """Raised when the spreadsheet or range is not found (404)."""


class APIError(TransportError):
    """Raised when the API returns an error."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code
