"""Utility modules for Quantive Export.

This package contains:
- console: Rich-based terminal output utilities
- errors: Custom exceptions and exit codes
- logging: Logging configuration
- retry: Exponential backoff for transient API failures
"""

from quantive_export.utils.console import (
    console,
    print_error,
    print_header,
    print_info,
    print_success,
    print_warning,
)
from quantive_export.utils.errors import (
    ConfigurationError,
    ExitCode,
    QuantiveExportError,
)
from quantive_export.utils.logging import apply_log_level, log_message, setup_logging
from quantive_export.utils.retry import RetryConfig, calculate_backoff_delay, with_retry

__all__ = [
    # Console
    "console",
    "print_error",
    "print_success",
    "print_warning",
    "print_info",
    "print_header",
    # Errors
    "ExitCode",
    "QuantiveExportError",
    "ConfigurationError",
    # Logging
    "setup_logging",
    "log_message",
    "apply_log_level",
    # Retry
    "RetryConfig",
    "calculate_backoff_delay",
    "with_retry",
]
