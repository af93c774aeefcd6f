"""Configuration management for Quantive Export.

This package contains:
- settings: QuantiveConfig dataclass, property keys and defaults
- store: PropertyStore implementations (in-memory, KEY=VALUE file)
- manager: ConfigManager for reading, validating and resolving configuration

Configuration Format
====================
The file store uses flat KEY=VALUE lines (environment variable style):

    QUANTIVE_API_TOKEN="..."
    QUANTIVE_ACCOUNT_ID="..."
    SESSION_ID="Q4 2024 OKRs"
    ENVIRONMENT=development
    DEVELOPMENT_API_RATE_LIMIT_DELAY=500
"""

from quantive_export.config.manager import (
    SENSITIVE_KEY_PATTERNS,
    ConfigManager,
    is_placeholder,
    is_sensitive_key,
    is_uuid,
)
from quantive_export.config.settings import CONFIG_FILE, ENVIRONMENT_DEFAULTS, QuantiveConfig
from quantive_export.config.store import (
    FilePropertyStore,
    InMemoryPropertyStore,
    PropertyStore,
)

__all__ = [
    # Core classes
    "ConfigManager",
    "QuantiveConfig",
    # Stores
    "PropertyStore",
    "InMemoryPropertyStore",
    "FilePropertyStore",
    # Helpers
    "is_placeholder",
    "is_sensitive_key",
    "is_uuid",
    # Constants
    "CONFIG_FILE",
    "ENVIRONMENT_DEFAULTS",
    "SENSITIVE_KEY_PATTERNS",
]
