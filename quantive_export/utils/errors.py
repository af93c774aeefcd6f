"""Custom exceptions and exit codes for Quantive Export.

This module defines the exit codes and the base of the exception
hierarchy used throughout the application.
"""

from enum import IntEnum
from typing import ClassVar


class ExitCode(IntEnum):
    """Process exit codes reported by the command-line interface."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    CONFIG_ERROR = 3  # 2 is reserved for CLI usage errors
    USER_CANCELLED = 4
    API_ERROR = 5


class QuantiveExportError(Exception):
    """Base exception for Quantive Export errors.

    All custom exceptions in this application should inherit from this class.
    Each exception type has an associated exit code for proper error reporting.
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.GENERAL_ERROR

    def __init__(self, message: str, exit_code: ExitCode | None = None) -> None:
        """Initialize the exception."""
        super().__init__(message)
        self._exit_code = exit_code

    @property
    def exit_code(self) -> ExitCode:
        """Get the exit code for this exception."""
        if self._exit_code is not None:
            return self._exit_code
        return self.__class__._default_exit_code


class ConfigurationError(QuantiveExportError):
    """Configuration is missing, a placeholder, or malformed.

    Raised when:
    - A required credential (API token, account ID, session ID) is empty
    - A credential still holds the template placeholder value
    - A session name cannot be resolved to a session ID
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.CONFIG_ERROR


__all__ = [
    "ExitCode",
    "QuantiveExportError",
    "ConfigurationError",
]
