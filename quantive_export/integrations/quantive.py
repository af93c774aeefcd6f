"""Quantive Results REST API client.

A thin synchronous wrapper around the Quantive Results API. Every request
is an authenticated GET; successful responses are returned as the parsed
JSON payload without any reshaping.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

import httpx

from quantive_export.integrations.exceptions import (
    QuantiveApiError,
    QuantiveAuthenticationError,
    QuantiveNotFoundError,
    QuantiveRateLimitError,
    QuantiveResponseParseError,
)
from quantive_export.utils.retry import RetryConfig, with_retry

if TYPE_CHECKING:
    from quantive_export.config.settings import QuantiveConfig

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://app.us.quantive.com/results/api/v1"
DEFAULT_TIMEOUT_SECONDS = 30.0
ACCOUNT_ID_HEADER = "gtmhub-accountId"

# Longest response excerpt included in error messages
_MAX_ERROR_BODY_CHARS = 200


class QuantiveApiClient:
    """Client for the Quantive Results API.

    HTTP Client Ownership:
        An httpx.Client may be injected (connection sharing, tests with
        httpx.MockTransport). Otherwise the client creates its own and
        closes it in close() / on context-manager exit.

    Pacing and retries are disabled by default, so each API method issues
    exactly one request. from_config() enables both from configuration.

    Attributes:
        api_token: Bearer token sent in the Authorization header
        account_id: Account ID sent in the gtmhub-accountId header
        base_url: API root without a trailing slash
    """

    def __init__(
        self,
        api_token: str,
        account_id: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        rate_limit_delay: float = 0.0,
        max_retries: int = 0,
        retry_delay: float = 0.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_token: Quantive API token
            account_id: Quantive account ID
            base_url: API root URL
            timeout_seconds: Per-request timeout
            rate_limit_delay: Minimum seconds between consecutive requests
            max_retries: Retries for 429/5xx responses and network failures
            retry_delay: Delay before the first retry, in seconds
            http_client: Optional shared httpx.Client
        """
        self.api_token = api_token
        self.account_id = account_id
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.rate_limit_delay = rate_limit_delay
        self.retry_config = RetryConfig(
            max_retries=max_retries,
            base_delay_seconds=retry_delay,
            max_delay_seconds=max(60.0, retry_delay),
        )
        self._http_client = http_client
        self._owns_client = http_client is None
        self._last_request_at: float | None = None

    @classmethod
    def from_config(
        cls,
        config: QuantiveConfig,
        http_client: httpx.Client | None = None,
    ) -> QuantiveApiClient:
        """Create a client carrying the pacing and retry settings of a config.

        Delays in the configuration are milliseconds.
        """
        return cls(
            config.api_token,
            config.account_id,
            rate_limit_delay=config.api_rate_limit_delay / 1000,
            max_retries=config.max_retries,
            retry_delay=config.retry_delay / 1000,
            http_client=http_client,
        )

    def __enter__(self) -> QuantiveApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client and self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    @property
    def headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            ACCOUNT_ID_HEADER: self.account_id,
        }

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    def get_sessions(self) -> Any:
        """List all sessions visible to the account.

        API endpoint: GET /sessions
        """
        return self._get("/sessions")

    def get_session(self, session_id: str) -> Any:
        """Fetch a single session.

        API endpoint: GET /sessions/{sessionId}
        """
        return self._get(f"/sessions/{session_id}")

    def get_objectives(self, session_id: str) -> Any:
        """List the objectives of a session.

        API endpoint: GET /sessions/{sessionId}/objectives
        """
        return self._get(f"/sessions/{session_id}/objectives")

    def get_key_results(self, objective_id: str) -> Any:
        """List the key results of an objective.

        API endpoint: GET /objectives/{objectiveId}/key-results
        """
        return self._get(f"/objectives/{objective_id}/key-results")

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    def _get(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        send = with_retry(
            self.retry_config,
            is_retryable=_is_retryable_error,
            on_retry=self._log_retry,
        )(self._send)
        return send(url)

    def _send(self, url: str) -> Any:
        """Issue one GET request and parse the response.

        Raises:
            QuantiveApiError: For transport failures and non-2xx statuses
            QuantiveResponseParseError: If the body is not valid JSON
        """
        self._throttle()
        logger.debug(f"GET {url}")

        try:
            response = self._client().get(
                url,
                headers=self.headers,
                timeout=httpx.Timeout(self.timeout_seconds),
            )
        except httpx.HTTPError as e:
            raise QuantiveApiError(f"Network request failed: {e}", url=url) from e
        finally:
            self._last_request_at = time.monotonic()

        self._check_status(response, url)

        try:
            return response.json()
        except ValueError as e:
            raise QuantiveResponseParseError(
                f"Invalid JSON response from Quantive API ({url}): {e}",
                status_code=response.status_code,
                url=url,
                raw_response=response.text,
            ) from e

    def _client(self) -> httpx.Client:
        if self._http_client is None:
            self._http_client = httpx.Client(timeout=httpx.Timeout(self.timeout_seconds))
        return self._http_client

    def _throttle(self) -> None:
        """Space consecutive requests at least rate_limit_delay seconds apart."""
        if self.rate_limit_delay <= 0 or self._last_request_at is None:
            return
        remaining = self.rate_limit_delay - (time.monotonic() - self._last_request_at)
        if remaining > 0:
            time.sleep(remaining)

    @staticmethod
    def _check_status(response: httpx.Response, url: str) -> None:
        """Map a non-2xx response to the matching exception."""
        status = response.status_code
        if 200 <= status < 300:
            return

        body = response.text[:_MAX_ERROR_BODY_CHARS]
        message = f"Quantive API request failed with status {status} ({url}): {body}"

        if status in (401, 403):
            raise QuantiveAuthenticationError(message, status_code=status, url=url)
        if status == 404:
            raise QuantiveNotFoundError(message, status_code=status, url=url)
        if status == 429:
            raise QuantiveRateLimitError(message, status_code=status, url=url)
        raise QuantiveApiError(message, status_code=status, url=url)

    @staticmethod
    def _log_retry(attempt: int, delay: float, error: Exception) -> None:
        logger.warning(f"Quantive API retry {attempt} in {delay:.1f}s after error: {error}")


def _is_retryable_error(error: Exception) -> bool:
    """Rate limits, server errors and network failures are transient."""
    if isinstance(error, QuantiveResponseParseError):
        return False
    if isinstance(error, QuantiveRateLimitError):
        return True
    if isinstance(error, QuantiveApiError):
        return error.status_code is None or error.status_code >= 500
    return False


__all__ = [
    "ACCOUNT_ID_HEADER",
    "DEFAULT_BASE_URL",
    "QuantiveApiClient",
]
