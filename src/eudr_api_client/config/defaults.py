"""Default configuration values.

This module defines the default configuration values used when no configuration
file is provided or when configuration values are not specified.
"""

from typing import Any

# Default configuration dictionary
# This is used as a fallback when no configuration file is present
DEFAULT_CONFIG: dict[str, Any] = {
    "client": {
        # No explicit endpoint: generated from webServiceClientId
        "endpoint": None,
        # Acceptance environment unless configured otherwise
        "webServiceClientId": "eudr-test",
        "username": None,
        "password": None,
        "timestampValidity": 60,
        # Milliseconds
        "timeout": 10000,
        "ssl": False,
    },
    "logging": {
        "level": "warn",
        "structured": True,
        "redact_credentials": True,
    },
}

# Default configuration file path
DEFAULT_CONFIG_PATH = "config/eudr.json"
