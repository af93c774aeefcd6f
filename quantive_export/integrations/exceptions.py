"""Exceptions raised by the Quantive API client.

This module defines the exception hierarchy for the integrations package:
- QuantiveApiError: Base exception for all API failures (non-2xx, network)
- QuantiveAuthenticationError: 401/403 responses
- QuantiveNotFoundError: 404 responses
- QuantiveRateLimitError: 429 responses
- QuantiveResponseParseError: Response body is not valid JSON
"""

from __future__ import annotations

from typing import ClassVar

from quantive_export.utils.errors import ExitCode, QuantiveExportError


class QuantiveApiError(QuantiveExportError):
    """Raised when a Quantive API request fails.

    Attributes:
        status_code: HTTP status code, or None for transport failures
        url: The request URL
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.API_ERROR

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class QuantiveAuthenticationError(QuantiveApiError):
    """Raised when the API rejects the token or account ID (401/403)."""

    pass


class QuantiveNotFoundError(QuantiveApiError):
    """Raised when the requested resource does not exist (404)."""

    pass


class QuantiveRateLimitError(QuantiveApiError):
    """Raised when the API reports too many requests (429)."""

    pass


class QuantiveResponseParseError(QuantiveApiError):
    """Raised when a successful response body is not valid JSON.

    Attributes:
        raw_response: The body text that failed to parse
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        raw_response: str | None = None,
    ) -> None:
        self.raw_response = raw_response
        super().__init__(message, status_code=status_code, url=url)


__all__ = [
    "QuantiveApiError",
    "QuantiveAuthenticationError",
    "QuantiveNotFoundError",
    "QuantiveRateLimitError",
    "QuantiveResponseParseError",
]
