"""Configuration manager for Quantive Export.

This module provides the ConfigManager class for reading and writing
configuration through a persisted property store, applying defaults,
validating credentials, and resolving session names to session IDs.

Lookup order for environment-qualified settings (rate limit delay,
retries, log level):

    1. {ENVIRONMENT}_{NAME} property (e.g. DEVELOPMENT_API_RATE_LIMIT_DELAY)
    2. {NAME} property
    3. Built-in per-environment defaults
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from typing import Any

from quantive_export.config.settings import (
    ACCOUNT_ID_KEY,
    API_RATE_LIMIT_DELAY,
    API_TOKEN_KEY,
    CONFIG_FILE,
    DEFAULT_ENVIRONMENT,
    DEFAULT_LOOKBACK_DAYS,
    ENVIRONMENT_KEY,
    GOOGLE_DOC_ID_KEY,
    GOOGLE_SHEET_ID_KEY,
    LOG_LEVEL,
    LOOKBACK_DAYS_KEY,
    MAX_RETRIES,
    RETRY_DELAY,
    SESSION_ID_KEY,
    QuantiveConfig,
    environment_defaults,
)
from quantive_export.config.store import FilePropertyStore, PropertyStore
from quantive_export.integrations.quantive import QuantiveApiClient
from quantive_export.utils.console import console, print_header, print_info
from quantive_export.utils.errors import ConfigurationError
from quantive_export.utils.logging import log_message

logger = logging.getLogger(__name__)

MIN_API_TOKEN_LENGTH = 10

# Keys containing these substrings are considered sensitive and should not be logged
SENSITIVE_KEY_PATTERNS = ("TOKEN", "KEY", "SECRET", "PASSWORD", "CREDENTIAL")

# 8-4-4-4-12 alphanumeric groups. Session IDs issued by some Quantive
# environments are not strictly hexadecimal.
UUID_PATTERN = re.compile(
    r"^[0-9a-z]{8}-[0-9a-z]{4}-[0-9a-z]{4}-[0-9a-z]{4}-[0-9a-z]{12}$",
    re.IGNORECASE,
)

# Template values such as "your-api-token-here" or "your_account_id_here"
PLACEHOLDER_PATTERN = re.compile(r"^your[-_].*[-_]here$", re.IGNORECASE)

_NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")


def is_sensitive_key(key: str) -> bool:
    """Check if a configuration key holds a secret."""
    key_upper = key.upper()
    return any(pattern in key_upper for pattern in SENSITIVE_KEY_PATTERNS)


def is_uuid(value: str | None) -> bool:
    """Check if a value has the shape of a session UUID."""
    return bool(value) and bool(UUID_PATTERN.match(value.strip()))


def is_placeholder(value: str | None) -> bool:
    """Check if a value is an unreplaced template placeholder."""
    return bool(value) and bool(PLACEHOLDER_PATTERN.match(value.strip()))


def _parse_number(value: str) -> int | float | None:
    value = value.strip()
    if not _NUMBER_PATTERN.match(value):
        return None
    number = float(value)
    return int(number) if number.is_integer() else number


class ConfigManager:
    """Reads, writes and validates configuration held in a property store.

    Attributes:
        store: Property store backing all reads and writes
    """

    def __init__(
        self,
        store: PropertyStore | None = None,
        client_factory: Callable[[str, str], QuantiveApiClient] = QuantiveApiClient,
    ) -> None:
        """Initialize the configuration manager.

        Args:
            store: Property store. Defaults to the file at CONFIG_FILE.
            client_factory: Builds an API client from (api_token, account_id);
                            used only for session name resolution.
        """
        self.store = store if store is not None else FilePropertyStore(CONFIG_FILE)
        self._client_factory = client_factory

    # ------------------------------------------------------------------
    # Property access
    # ------------------------------------------------------------------

    def get_property(self, key: str, default: Any = None) -> Any:
        """Get a property value, or ``default`` if it is not set."""
        value = self.store.get_property(key)
        return default if value is None else value

    def set_property(self, key: str, value: object) -> None:
        """Persist a single property."""
        self.store.set_property(key, value)
        self._log_property_save(key)

    def set_properties(self, properties: Mapping[str, object]) -> None:
        """Persist several properties at once."""
        self.store.set_properties(properties)
        for key in properties:
            self._log_property_save(key)

    def _log_property_save(self, key: str) -> None:
        if is_sensitive_key(key):
            log_message(f"Property saved: {key}=<REDACTED>")
        else:
            log_message(f"Property saved: {key}")

    # ------------------------------------------------------------------
    # Configuration assembly
    # ------------------------------------------------------------------

    def get_config(self, resolve_session: bool = True) -> QuantiveConfig:
        """Assemble the effective configuration.

        Missing optional values fall back to their defaults. A session
        identifier that is not UUID-shaped is treated as a session name and
        resolved through the API.

        Args:
            resolve_session: Set to False to keep the stored session
                             identifier as-is (no API call)

        Returns:
            QuantiveConfig with the resolved session ID

        Raises:
            ConfigurationError: If session name resolution fails
        """
        environment = self.get_property(ENVIRONMENT_KEY, "").strip() or DEFAULT_ENVIRONMENT

        session_id = self.get_property(SESSION_ID_KEY, "").strip()
        if resolve_session and session_id and not is_uuid(session_id):
            session_id = self.resolve_session_id(session_id)

        return QuantiveConfig(
            api_token=self.get_property(API_TOKEN_KEY, ""),
            account_id=self.get_property(ACCOUNT_ID_KEY, ""),
            session_id=session_id,
            google_doc_id=self.get_property(GOOGLE_DOC_ID_KEY, ""),
            google_sheet_id=self.get_property(GOOGLE_SHEET_ID_KEY, ""),
            lookback_days=self._get_lookback_days(),
            environment=environment,
            api_rate_limit_delay=self._get_tuned_setting(environment, API_RATE_LIMIT_DELAY),
            max_retries=int(self._get_tuned_setting(environment, MAX_RETRIES)),
            retry_delay=self._get_tuned_setting(environment, RETRY_DELAY),
            log_level=str(self._get_tuned_setting(environment, LOG_LEVEL)).upper(),
        )

    def _get_lookback_days(self) -> int:
        raw = self.get_property(LOOKBACK_DAYS_KEY)
        if raw is None or not raw.strip():
            return DEFAULT_LOOKBACK_DAYS
        try:
            return int(raw.strip())
        except ValueError:
            logger.warning(
                f"Invalid {LOOKBACK_DAYS_KEY} value '{raw}', "
                f"using default of {DEFAULT_LOOKBACK_DAYS}"
            )
            return DEFAULT_LOOKBACK_DAYS

    def _get_tuned_setting(self, environment: str, name: str) -> Any:
        """Resolve {ENV}_{NAME}, then {NAME}, then the environment default.

        Numeric settings skip text and negative values, keeping the next
        value down the chain.
        """
        fallback = environment_defaults(environment)[name]
        unqualified = self.get_property(name)
        if unqualified is not None and unqualified.strip():
            number = _parse_number(unqualified)
            candidate = number if number is not None else unqualified.strip()
            fallback = _checked_setting(environment, name, candidate, fallback)
        value = self.get_environment_setting(environment, name, fallback)
        return _checked_setting(environment, name, value, fallback)

    def get_environment_setting(self, environment: str, name: str, default: Any) -> Any:
        """Read the {ENVIRONMENT}_{NAME} property.

        Args:
            environment: Environment name (e.g. "development")
            name: Setting name (e.g. "API_RATE_LIMIT_DELAY")
            default: Value returned when the property is missing or blank

        Returns:
            An int or float for numeric values, the stripped string for other
            values, or ``default``
        """
        key = f"{environment.strip().upper()}_{name}"
        raw = self.get_property(key)
        if raw is None or not raw.strip():
            return default
        number = _parse_number(raw)
        return number if number is not None else raw.strip()

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_api_token(self, token: str | None) -> None:
        """Validate the API token.

        Raises:
            ConfigurationError: If the token is empty, a placeholder, or too short
        """
        if not token or not isinstance(token, str) or not token.strip():
            raise ConfigurationError("API token must be a non-empty string")
        if is_placeholder(token):
            raise ConfigurationError(
                f"Please replace the placeholder API token with your actual "
                f"Quantive API token ({API_TOKEN_KEY})"
            )
        if len(token.strip()) < MIN_API_TOKEN_LENGTH:
            raise ConfigurationError(
                f"API token appears to be invalid (shorter than "
                f"{MIN_API_TOKEN_LENGTH} characters)"
            )

    def validate_account_id(self, account_id: str | None) -> None:
        """Validate the account ID.

        Raises:
            ConfigurationError: If the account ID is empty or a placeholder
        """
        if not account_id or not isinstance(account_id, str) or not account_id.strip():
            raise ConfigurationError("Account ID must be a non-empty string")
        if is_placeholder(account_id):
            raise ConfigurationError(
                f"Please replace the placeholder account ID with your actual "
                f"Quantive account ID ({ACCOUNT_ID_KEY})"
            )

    def validate_session_id(self, session_id: str | None) -> None:
        """Validate the session identifier.

        A value that is not UUID-shaped is accepted with a warning, since it
        may be a session name that get_config() resolves.

        Raises:
            ConfigurationError: If the session ID is empty or a placeholder
        """
        if not session_id or not isinstance(session_id, str) or not session_id.strip():
            raise ConfigurationError("Session ID must be a non-empty string")
        if is_placeholder(session_id):
            raise ConfigurationError(
                f"Please replace the placeholder session ID with your actual "
                f"session UUID or name ({SESSION_ID_KEY})"
            )
        if not is_uuid(session_id):
            logger.warning(
                f"Warning: Session ID does not appear to be a valid UUID format: "
                f"'{session_id}'. It will be treated as a session name."
            )

    def validate_config(self) -> None:
        """Validate the stored credentials.

        Checks the API token, account ID and session ID in that order
        against the stored values; session names are not resolved.

        Raises:
            ConfigurationError: For the first invalid value
        """
        self.validate_api_token(self.get_property(API_TOKEN_KEY, ""))
        self.validate_account_id(self.get_property(ACCOUNT_ID_KEY, ""))
        self.validate_session_id(self.get_property(SESSION_ID_KEY, ""))
        log_message("Configuration validated successfully")

    # ------------------------------------------------------------------
    # Session resolution
    # ------------------------------------------------------------------

    def resolve_session_id(self, identifier: str | None) -> str:
        """Resolve a session name or UUID to a session UUID.

        UUID-shaped identifiers are returned unchanged without contacting
        the API. Names are matched against the session list, exact match
        first, then case-insensitively.

        Args:
            identifier: Session UUID or session name

        Returns:
            The session UUID

        Raises:
            ConfigurationError: If the identifier is empty or a placeholder,
                                credentials are missing, the session list
                                cannot be read, or no session matches
            QuantiveApiError: If the sessions request fails
        """
        if not identifier or not isinstance(identifier, str) or not identifier.strip():
            raise ConfigurationError("Session identifier must be a non-empty string")
        identifier = identifier.strip()

        if is_placeholder(identifier):
            raise ConfigurationError(
                "Please replace the placeholder session identifier with an actual "
                "session name or UUID"
            )

        if is_uuid(identifier):
            return identifier

        api_token = self.get_property(API_TOKEN_KEY, "")
        account_id = self.get_property(ACCOUNT_ID_KEY, "")
        if not api_token or not account_id:
            raise ConfigurationError(
                "API token and account ID must be configured to resolve session names"
            )

        log_message(f"Resolving session name '{identifier}'")
        client = self._client_factory(api_token, account_id)
        try:
            sessions = client.get_sessions()
        finally:
            client.close()

        if not isinstance(sessions, list):
            raise ConfigurationError("Failed to retrieve sessions list from Quantive API")

        session = _find_session(sessions, identifier)
        if session is None:
            names = [
                s["name"]
                for s in sessions
                if isinstance(s, dict) and isinstance(s.get("name"), str) and s["name"]
            ]
            if names:
                available = f"Available session names: {', '.join(names)}"
            else:
                available = "No sessions with names found."
            raise ConfigurationError(f'Session with name "{identifier}" not found. {available}')

        session_id = session.get("id")
        if not session_id:
            raise ConfigurationError(
                f'Found session "{session.get("name")}" but it has no ID field'
            )

        log_message(f"Resolved session '{identifier}' to {session_id}")
        return str(session_id)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def show(self) -> None:
        """Display the stored configuration using Rich formatting."""
        print_header("Current Configuration")

        if isinstance(self.store, FilePropertyStore):
            print_info(f"Config file: {self.store.path}")
            console.print()

        environment = self.get_property(ENVIRONMENT_KEY, "").strip() or DEFAULT_ENVIRONMENT

        console.print("  [bold]Quantive:[/bold]")
        console.print(f"    API Token: {self._display_value(API_TOKEN_KEY)}")
        console.print(f"    Account ID: {self._display_value(ACCOUNT_ID_KEY)}")
        console.print(f"    Session: {self._display_value(SESSION_ID_KEY)}")
        console.print()

        console.print("  [bold]Google Workspace:[/bold]")
        console.print(f"    Doc ID: {self._display_value(GOOGLE_DOC_ID_KEY)}")
        console.print(f"    Sheet ID: {self._display_value(GOOGLE_SHEET_ID_KEY)}")
        console.print()

        console.print("  [bold]Runtime:[/bold]")
        console.print(f"    Environment: {environment}")
        console.print(f"    Lookback Days: {self._get_lookback_days()}")
        for name in (API_RATE_LIMIT_DELAY, MAX_RETRIES, RETRY_DELAY, LOG_LEVEL):
            console.print(f"    {name}: {self._get_tuned_setting(environment, name)}")
        console.print()

    def _display_value(self, key: str) -> str:
        value = self.get_property(key, "")
        if not value:
            return "(not set)"
        if is_sensitive_key(key):
            return f"{value[:4]}...(redacted)" if len(value) > 8 else "(redacted)"
        return str(value)


def _checked_setting(environment: str, name: str, value: Any, fallback: Any) -> Any:
    """Keep ``fallback`` when a numeric setting holds text or a negative number."""
    if not isinstance(fallback, (int, float)):
        return value
    if not isinstance(value, (int, float)):
        logger.warning(
            f"Ignoring non-numeric value for {name} in {environment}, using {fallback}"
        )
        return fallback
    if value < 0:
        logger.warning(f"Ignoring negative value for {name} in {environment}, using {fallback}")
        return fallback
    return value


def _find_session(sessions: list[Any], name: str) -> dict[str, Any] | None:
    """Find a session by exact name, falling back to a case-insensitive match."""
    named = [s for s in sessions if isinstance(s, dict) and isinstance(s.get("name"), str)]
    for session in named:
        if session["name"] == name:
            return session
    folded = name.casefold()
    for session in named:
        if session["name"].strip().casefold() == folded:
            return session
    return None


__all__ = [
    "ConfigManager",
    "MIN_API_TOKEN_LENGTH",
    "PLACEHOLDER_PATTERN",
    "SENSITIVE_KEY_PATTERNS",
    "UUID_PATTERN",
    "is_placeholder",
    "is_sensitive_key",
    "is_uuid",
]
