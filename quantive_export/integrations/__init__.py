"""Integrations with external services.

This package contains:
- quantive: QuantiveApiClient for the Quantive Results REST API
- exceptions: API error hierarchy
"""

from quantive_export.integrations.exceptions import (
    QuantiveApiError,
    QuantiveAuthenticationError,
    QuantiveNotFoundError,
    QuantiveRateLimitError,
    QuantiveResponseParseError,
)
from quantive_export.integrations.quantive import (
    ACCOUNT_ID_HEADER,
    DEFAULT_BASE_URL,
    QuantiveApiClient,
)

__all__ = [
    "QuantiveApiClient",
    "DEFAULT_BASE_URL",
    "ACCOUNT_ID_HEADER",
    "QuantiveApiError",
    "QuantiveAuthenticationError",
    "QuantiveNotFoundError",
    "QuantiveRateLimitError",
    "QuantiveResponseParseError",
]
