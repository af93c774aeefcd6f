"""Logging configuration for Quantive Export.

File logging is controlled by environment variables; the verbosity of the
package logger follows the LOG_LEVEL configuration setting.

Environment Variables:
    QUANTIVE_EXPORT_LOG: Set to "true" to enable logging (default: "false")
    QUANTIVE_EXPORT_LOG_FILE: Path to log file (default: ~/.quantive-export.log)
"""

import logging
import os
from pathlib import Path

LOGGER_NAME = "quantive_export"

# Environment variable configuration
LOG_ENABLED = os.environ.get("QUANTIVE_EXPORT_LOG", "false").lower() == "true"
LOG_FILE = Path(
    os.environ.get("QUANTIVE_EXPORT_LOG_FILE", str(Path.home() / ".quantive-export.log"))
)

# LOG_LEVEL names accepted in configuration (WARN is the template spelling)
LOG_LEVELS: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

# Module-level logger instance
_logger: logging.Logger | None = None


def setup_logging() -> logging.Logger:
    """Configure logging based on environment variables.

    Creates a logger that writes to the configured log file when
    QUANTIVE_EXPORT_LOG is set to "true". Otherwise, uses a NullHandler
    to suppress output.

    Returns:
        Configured logger instance
    """
    global _logger

    if _logger is not None:
        return _logger

    logger = logging.getLogger(LOGGER_NAME)

    # Clear any existing handlers
    logger.handlers.clear()

    if LOG_ENABLED:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.FileHandler(LOG_FILE)
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    else:
        logger.addHandler(logging.NullHandler())

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the configured logger instance, creating it if necessary."""
    global _logger
    if _logger is None:
        return setup_logging()
    return _logger


def log_message(message: str) -> None:
    """Log an informational message through the package logger."""
    get_logger().info(message)


def apply_log_level(level_name: str) -> int:
    """Set the package logger level from a LOG_LEVEL setting.

    Unknown names leave the level at INFO.

    Args:
        level_name: Level name such as "DEBUG", "INFO", "WARN" or "ERROR"

    Returns:
        The numeric logging level that was applied
    """
    level = LOG_LEVELS.get(str(level_name).strip().upper(), logging.INFO)
    get_logger().setLevel(level)
    return level


__all__ = [
    "LOG_ENABLED",
    "LOG_FILE",
    "LOG_LEVELS",
    "LOGGER_NAME",
    "setup_logging",
    "get_logger",
    "log_message",
    "apply_log_level",
]
