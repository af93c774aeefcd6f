"""Configuration dataclass, property keys and defaults for Quantive Export."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

# Property keys
API_TOKEN_KEY = "QUANTIVE_API_TOKEN"
ACCOUNT_ID_KEY = "QUANTIVE_ACCOUNT_ID"
SESSION_ID_KEY = "SESSION_ID"
GOOGLE_DOC_ID_KEY = "GOOGLE_DOC_ID"
GOOGLE_SHEET_ID_KEY = "GOOGLE_SHEET_ID"
LOOKBACK_DAYS_KEY = "LOOKBACK_DAYS"
ENVIRONMENT_KEY = "ENVIRONMENT"

# Environment-qualified setting names, read as {ENV}_{NAME}
API_RATE_LIMIT_DELAY = "API_RATE_LIMIT_DELAY"
MAX_RETRIES = "MAX_RETRIES"
RETRY_DELAY = "RETRY_DELAY"
LOG_LEVEL = "LOG_LEVEL"

DEFAULT_ENVIRONMENT = "production"
DEFAULT_LOOKBACK_DAYS = 7

# Per-environment defaults; delays are milliseconds
ENVIRONMENT_DEFAULTS: dict[str, dict[str, Any]] = {
    "development": {
        API_RATE_LIMIT_DELAY: 500,
        MAX_RETRIES: 3,
        RETRY_DELAY: 2000,
        LOG_LEVEL: "DEBUG",
    },
    "staging": {
        API_RATE_LIMIT_DELAY: 1000,
        MAX_RETRIES: 3,
        RETRY_DELAY: 2000,
        LOG_LEVEL: "INFO",
    },
    "production": {
        API_RATE_LIMIT_DELAY: 1500,
        MAX_RETRIES: 3,
        RETRY_DELAY: 2000,
        LOG_LEVEL: "WARN",
    },
}

CONFIG_KEYS: tuple[str, ...] = (
    API_TOKEN_KEY,
    ACCOUNT_ID_KEY,
    SESSION_ID_KEY,
    GOOGLE_DOC_ID_KEY,
    GOOGLE_SHEET_ID_KEY,
    LOOKBACK_DAYS_KEY,
    ENVIRONMENT_KEY,
    API_RATE_LIMIT_DELAY,
    MAX_RETRIES,
    RETRY_DELAY,
    LOG_LEVEL,
)


def environment_defaults(environment: str) -> dict[str, Any]:
    """Defaults for an environment; unknown names get the production values."""
    return ENVIRONMENT_DEFAULTS.get(
        environment.strip().lower(), ENVIRONMENT_DEFAULTS[DEFAULT_ENVIRONMENT]
    )


@dataclass
class QuantiveConfig:
    """Effective configuration assembled by ConfigManager.get_config().

    Attributes:
        api_token: Quantive API token
        account_id: Quantive account ID
        session_id: Session UUID (session names are resolved before use)
        google_doc_id: Target Google Doc ID (optional)
        google_sheet_id: Target Google Sheet ID (optional)
        lookback_days: Days of history to include in reports
        environment: development, staging or production
        api_rate_limit_delay: Milliseconds between API calls
        max_retries: Retry attempts for transient API failures
        retry_delay: Milliseconds before the first retry
        log_level: DEBUG, INFO, WARN or ERROR
    """

    api_token: str = ""
    account_id: str = ""
    session_id: str = ""
    google_doc_id: str = ""
    google_sheet_id: str = ""
    lookback_days: int = DEFAULT_LOOKBACK_DAYS
    environment: str = DEFAULT_ENVIRONMENT
    api_rate_limit_delay: int | float = ENVIRONMENT_DEFAULTS[DEFAULT_ENVIRONMENT][
        API_RATE_LIMIT_DELAY
    ]
    max_retries: int = ENVIRONMENT_DEFAULTS[DEFAULT_ENVIRONMENT][MAX_RETRIES]
    retry_delay: int | float = ENVIRONMENT_DEFAULTS[DEFAULT_ENVIRONMENT][RETRY_DELAY]
    log_level: str = ENVIRONMENT_DEFAULTS[DEFAULT_ENVIRONMENT][LOG_LEVEL]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# Default configuration file path
CONFIG_FILE = Path(
    os.environ.get("QUANTIVE_EXPORT_CONFIG", str(Path.home() / ".quantive-export"))
)


__all__ = [
    "QuantiveConfig",
    "CONFIG_FILE",
    "CONFIG_KEYS",
    "ENVIRONMENT_DEFAULTS",
    "DEFAULT_ENVIRONMENT",
    "DEFAULT_LOOKBACK_DAYS",
    "environment_defaults",
]
