"""Quantive Export - OKR data export from the Quantive Results API.

This package provides configuration management backed by a persisted
property store and a thin client for the Quantive Results REST API.
"""

__version__ = "2.0.0"
SCRIPT_NAME = "quantive-export"

__all__ = [
    "__version__",
    "SCRIPT_NAME",
]
